"""
Structured logging for the API, the webhook receiver and the scripts.

Console output in development (LOG_LEVEL=DEBUG), JSON lines otherwise. Events
emitted while a request is handled carry the request_id bound by
RequestIDMiddleware.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, MutableMapping

import structlog

from golocal_spaces.config import DEBUG, LOG_LEVEL

Processor = Callable[[Any, str, MutableMapping[str, Any]], Any]

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("stripe", "botocore", "boto3", "s3transfer", "urllib3", "uvicorn.access")

# Event keys whose values must never reach the log sink
SECRET_KEYS = frozenset({"client_secret", "api_key", "webhook_secret", "stripe_signature"})


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Replace payment secrets in an event with a placeholder."""
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def setup_logging() -> None:
    """Configure stdlib logging for libraries and structlog for our own events."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        level=LOG_LEVEL,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
    ]
    if DEBUG:
        processors += [structlog.dev.set_exc_info, structlog.dev.ConsoleRenderer(colors=True)]
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(LOG_LEVEL)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
