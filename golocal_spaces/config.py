import os
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

SCHEMA = "golocal"

ALLOWED_ORIGINS_RAW = os.getenv("ALLOWED_ORIGINS")
if not ALLOWED_ORIGINS_RAW:
    raise ValueError("ALLOWED_ORIGINS must be set in the environment")

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in ALLOWED_ORIGINS_RAW.split(",")
]

# Stripe
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY") or None
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET") or None
APP_URL = os.getenv("APP_URL", "http://localhost:3000").rstrip("/")

# Pricing
PLATFORM_FEE_RATE = Decimal(os.getenv("PLATFORM_FEE_RATE", "0.10"))
CURRENCY = os.getenv("CURRENCY", "usd").lower()

# Booking policy
REJECT_OVERLAPPING_BOOKINGS = os.getenv("REJECT_OVERLAPPING_BOOKINGS", "true").lower() == "true"
REQUIRE_PAYOUT_ONBOARDING = os.getenv("REQUIRE_PAYOUT_ONBOARDING", "false").lower() == "true"

# Object storage (S3-compatible)
STORAGE_BUCKET = os.getenv("STORAGE_BUCKET", "space-images")
STORAGE_ENDPOINT_URL = os.getenv("STORAGE_ENDPOINT_URL") or None
STORAGE_PUBLIC_BASE_URL = os.getenv("STORAGE_PUBLIC_BASE_URL") or None
STORAGE_REGION = os.getenv("STORAGE_REGION") or None
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
