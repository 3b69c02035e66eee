"""
FastAPI dependency injection providers.

Every component receives its collaborators through its constructor; these
providers wire them together for route handlers. Tests replace any of them
through app.dependency_overrides, e.g. a SQLite engine for get_db_engine or a
fake gateway for get_payment_gateway.

Example:
    >>> app.dependency_overrides[get_db_engine] = lambda: sqlite_engine
    >>> app.dependency_overrides[get_payment_gateway] = lambda: FakeGateway()
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Generator

from fastapi import Depends
from sqlalchemy.engine import Engine

from golocal_spaces.config import (
    APP_URL,
    MAX_UPLOAD_BYTES,
    STORAGE_BUCKET,
    STORAGE_ENDPOINT_URL,
    STORAGE_PUBLIC_BASE_URL,
    STORAGE_REGION,
    STRIPE_SECRET_KEY,
    STRIPE_WEBHOOK_SECRET,
)
from golocal_spaces.db.engine import engine
from golocal_spaces.payments.gateway import StripeGateway
from golocal_spaces.services.bookings import BookingService
from golocal_spaces.services.ledger import TransactionLedger
from golocal_spaces.services.notifications import NotificationEmitter
from golocal_spaces.services.payment_events import PaymentEventDispatcher
from golocal_spaces.services.payouts import PayoutAccountService
from golocal_spaces.services.spaces import SpaceService
from golocal_spaces.services.uploads import UploadService
from golocal_spaces.storage.object_storage import ObjectStorage, build_s3_client


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine
    """
    yield engine


def get_payment_gateway() -> StripeGateway:
    return StripeGateway(
        api_key=STRIPE_SECRET_KEY,
        webhook_secret=STRIPE_WEBHOOK_SECRET,
        app_url=APP_URL,
    )


@lru_cache(maxsize=1)
def _s3_client() -> Any:
    return build_s3_client(STORAGE_ENDPOINT_URL, STORAGE_REGION)


def get_object_storage() -> ObjectStorage:
    return ObjectStorage(
        _s3_client(),
        endpoint_url=STORAGE_ENDPOINT_URL,
        public_base_url=STORAGE_PUBLIC_BASE_URL,
    )


def get_notification_emitter(db: Engine = Depends(get_db_engine)) -> NotificationEmitter:
    return NotificationEmitter(db)


def get_transaction_ledger(db: Engine = Depends(get_db_engine)) -> TransactionLedger:
    return TransactionLedger(db)


def get_booking_service(
    db: Engine = Depends(get_db_engine),
    gateway: StripeGateway = Depends(get_payment_gateway),
    ledger: TransactionLedger = Depends(get_transaction_ledger),
    notifier: NotificationEmitter = Depends(get_notification_emitter),
) -> BookingService:
    return BookingService(db, gateway, ledger, notifier)


def get_payout_service(
    db: Engine = Depends(get_db_engine),
    gateway: StripeGateway = Depends(get_payment_gateway),
    notifier: NotificationEmitter = Depends(get_notification_emitter),
) -> PayoutAccountService:
    return PayoutAccountService(db, gateway, notifier)


def get_payment_event_dispatcher(
    db: Engine = Depends(get_db_engine),
    gateway: StripeGateway = Depends(get_payment_gateway),
    ledger: TransactionLedger = Depends(get_transaction_ledger),
    notifier: NotificationEmitter = Depends(get_notification_emitter),
    payouts: PayoutAccountService = Depends(get_payout_service),
) -> PaymentEventDispatcher:
    return PaymentEventDispatcher(db, gateway, ledger, notifier, payouts)


def get_space_service(db: Engine = Depends(get_db_engine)) -> SpaceService:
    return SpaceService(db)


def get_upload_service(
    storage: ObjectStorage = Depends(get_object_storage),
) -> UploadService:
    return UploadService(storage, default_bucket=STORAGE_BUCKET, max_bytes=MAX_UPLOAD_BYTES)
