"""
Prometheus metrics for bookings, payment processor calls, webhooks and side effects.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from golocal_spaces.metrics import payment_requests
    >>> payment_requests.labels(operation="payment_intent.create", outcome="success").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Booking Metrics
# =============================================================================

bookings_created = Counter(
    "golocal_bookings_created_total",
    "Total number of booking requests persisted",
)

booking_failures = Counter(
    "golocal_booking_failures_total",
    "Booking requests that did not produce a booking",
    ["reason"],
)
"""
Counter for failed booking requests.

Labels:
    reason: error code, e.g. validation_error, not_found, booking_conflict,
        payment_provider_error, persistence_error
"""

orphaned_authorizations = Counter(
    "golocal_orphaned_authorizations_total",
    "Payment authorizations left open without a local booking",
)
"""Incremented when the compensating cancel of an authorization also fails."""

# =============================================================================
# Payment Processor Metrics
# =============================================================================

payment_requests = Counter(
    "golocal_payment_requests_total",
    "Total requests made to the payment processor",
    ["operation", "outcome"],
)
"""
Counter for payment processor calls.

Labels:
    operation: e.g. "payment_intent.create", "account.retrieve", "refund.create"
    outcome: success or failure
"""

payment_latency = Histogram(
    "golocal_payment_latency_seconds",
    "Payment processor request latency in seconds",
    ["operation"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float("inf")),
)

# =============================================================================
# Webhook Metrics
# =============================================================================

webhook_events = Counter(
    "golocal_webhook_events_total",
    "Payment processor webhook deliveries",
    ["event_type", "outcome"],
)
"""
Counter for webhook deliveries.

Labels:
    event_type: processor event type (e.g. "payment_intent.succeeded")
    outcome: processed, duplicate, ignored, unhandled, rejected, failed
"""

# =============================================================================
# Side Effect Metrics
# =============================================================================

side_effect_failures = Counter(
    "golocal_side_effect_failures_total",
    "Best-effort side effects that failed",
    ["effect"],
)

uploads = Counter(
    "golocal_uploads_total",
    "Object storage uploads",
    ["bucket", "outcome"],
)
