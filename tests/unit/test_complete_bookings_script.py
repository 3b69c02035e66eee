"""Unit tests for the scheduled booking completion script."""

from datetime import date
from decimal import Decimal
from unittest.mock import patch
from uuid import UUID

import pytest
from sqlalchemy.engine import Engine

from golocal_spaces.db.readers.bookings import get_booking
from golocal_spaces.db.writers.bookings import confirm_paid_booking, insert_booking
from golocal_spaces.utils.datetime import utc_now
from scripts import complete_bookings


@pytest.mark.unit
def test_script_completes_bookings_as_of_date(
    db_engine: Engine, space_id: UUID, vendor_id: UUID, landlord_id: UUID
) -> None:
    with db_engine.begin() as conn:
        booking = insert_booking(
            conn,
            space_id=space_id,
            vendor_id=vendor_id,
            landlord_id=landlord_id,
            start_date=date(2025, 3, 1),
            end_date=date(2025, 3, 5),
            total_price=Decimal("600.00"),
            platform_fee=Decimal("60.00"),
            payment_intent_id="pi_script",
        )
        confirm_paid_booking(conn, booking["id"], utc_now())

    with patch.object(complete_bookings, "engine", db_engine):
        assert complete_bookings.main(["--as-of", "2025-03-04"]) == 0
        assert complete_bookings.main(["--as-of", "2025-03-05"]) == 1

    with db_engine.connect() as conn:
        assert get_booking(conn, booking["id"])["booking_status"] == "completed"


@pytest.mark.unit
def test_script_rejects_bad_date() -> None:
    with pytest.raises(SystemExit):
        complete_bookings.main(["--as-of", "March 5th"])
