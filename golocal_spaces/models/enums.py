"""String enums for status and type columns."""

from enum import Enum


class UserType(str, Enum):
    LANDLORD = "landlord"
    VENDOR = "vendor"
    BOTH = "both"


class SpaceType(str, Enum):
    PARKING_LOT = "parking_lot"
    STOREFRONT = "storefront"
    VACANT_LAND = "vacant_land"
    WAREHOUSE = "warehouse"
    OTHER = "other"


class SpaceStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING_VERIFICATION = "pending_verification"


class UsageType(str, Enum):
    FOOD_TRUCK = "food_truck"
    DRIVE_THRU = "drive_thru"
    RETAIL = "retail"
    STAND = "stand"
    POP_UP = "pop_up"
    EVENT = "event"
    OTHER = "other"


class RentalPeriodUnit(str, Enum):
    DAYS = "days"
    MONTHS = "months"
    YEARS = "years"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    DECLINED = "declined"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class TransactionType(str, Enum):
    PAYMENT = "payment"
    REFUND = "refund"
    PAYOUT = "payout"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class NotificationType(str, Enum):
    BOOKING_REQUEST = "booking_request"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_DECLINED = "booking_declined"
    PAYMENT_CONFIRMATION = "payment_confirmation"
    PAYMENT_FAILED = "payment_failed"
    REFUND_PROCESSED = "refund_processed"
    STRIPE_CONNECTED = "stripe_connected"


class WebhookEventStatus(str, Enum):
    APPLIED = "applied"  # core booking transition committed, side effects pending
    PROCESSED = "processed"
