"""
Webhook idempotency ledger writes.

claim_event() is called inside the transaction that applies the booking
transition. The unique (booking_id, charge_ref, event_type) index makes the
insert the arbiter between redeliveries: only the first one inserts, and a
concurrent duplicate blocks on the index until the first commits.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select, update
from sqlalchemy.engine import Connection

from golocal_spaces.db.writers._upsert import insert_ignore_conflict
from golocal_spaces.models.webhook_events import WebhookEvent
from golocal_spaces.utils.datetime import utc_now


@dataclass(frozen=True)
class EventClaim:
    """Outcome of claiming an idempotency key."""

    claimed: bool  # this delivery inserted the key and must apply the transition
    status: str  # "applied" or "processed"
    transition_applied: bool


def claim_event(
    conn: Connection,
    booking_id: UUID,
    charge_ref: str,
    event_type: str,
    provider_event_id: Optional[str],
) -> EventClaim:
    """
    Insert the idempotency key for an event, or read the existing one.

    Args:
        conn: Active database connection (within transaction)
        booking_id: Booking the event resolves to
        charge_ref: Processor reference carried by the event
        event_type: Processor event type
        provider_event_id: Processor event ID (evt_...), for auditing

    Returns:
        EventClaim: Whether this delivery owns the key, and the key's state
    """
    inserted = insert_ignore_conflict(
        conn,
        WebhookEvent,
        {
            "id": uuid4(),
            "booking_id": booking_id,
            "charge_ref": charge_ref,
            "event_type": event_type,
            "provider_event_id": provider_event_id,
            "status": "applied",
            "transition_applied": False,
            "created_at": utc_now(),
        },
        conflict_columns=["booking_id", "charge_ref", "event_type"],
    )
    if inserted:
        return EventClaim(claimed=True, status="applied", transition_applied=False)

    row = conn.execute(
        select(WebhookEvent.status, WebhookEvent.transition_applied)
        .where(WebhookEvent.booking_id == booking_id)
        .where(WebhookEvent.charge_ref == charge_ref)
        .where(WebhookEvent.event_type == event_type)
    ).one()
    return EventClaim(claimed=False, status=row.status, transition_applied=row.transition_applied)


def _key_filter(stmt, booking_id: UUID, charge_ref: str, event_type: str):  # type: ignore[no-untyped-def]
    return (
        stmt.where(WebhookEvent.booking_id == booking_id)
        .where(WebhookEvent.charge_ref == charge_ref)
        .where(WebhookEvent.event_type == event_type)
    )


def record_transition(
    conn: Connection, booking_id: UUID, charge_ref: str, event_type: str, applied: bool
) -> None:
    conn.execute(
        _key_filter(update(WebhookEvent), booking_id, charge_ref, event_type).values(
            transition_applied=applied
        )
    )


def mark_event_processed(
    conn: Connection, booking_id: UUID, charge_ref: str, event_type: str
) -> None:
    conn.execute(
        _key_filter(update(WebhookEvent), booking_id, charge_ref, event_type).values(
            status="processed", processed_at=utc_now()
        )
    )
