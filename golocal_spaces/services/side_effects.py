"""
Best-effort side effects.

Work that must not fail the operation that triggered it (notifications,
amenity and image inserts) is queued as a named callable instead of being
called inline. drain() runs every queued effect, logs and counts each failure,
and hands the failures back so the caller decides what they mean:

- booking creation drains after the response via FastAPI BackgroundTasks and
  only logs
- the webhook dispatcher drains synchronously and turns failures into a 500 so
  the processor redelivers

Example:
    >>> queue = BestEffortQueue()
    >>> queue.add("notify_landlord", notifier.notify, landlord_id, "booking_request", ...)
    >>> failed = queue.drain()
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

import structlog

from golocal_spaces.metrics import side_effect_failures

logger = structlog.get_logger(__name__)


@dataclass
class QueuedEffect:
    name: str
    fn: Callable[..., Any]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FailedEffect:
    name: str
    error: str


class BestEffortQueue:
    """Ordered collection of named side effects run by drain()."""

    def __init__(self) -> None:
        self._effects: list[QueuedEffect] = []

    def __len__(self) -> int:
        return len(self._effects)

    @property
    def names(self) -> list[str]:
        return [effect.name for effect in self._effects]

    def add(self, name: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self._effects.append(QueuedEffect(name=name, fn=fn, args=args, kwargs=kwargs))

    def drain(self) -> list[FailedEffect]:
        """
        Run and remove every queued effect.

        An effect fails when it raises or returns False. Failures never stop
        the remaining effects from running.

        Returns:
            list[FailedEffect]: One entry per failed effect, in queue order
        """
        effects, self._effects = self._effects, []
        failures: list[FailedEffect] = []

        for effect in effects:
            try:
                result = effect.fn(*effect.args, **effect.kwargs)
            except Exception as e:
                logger.exception("side_effect_failed", effect=effect.name, error=str(e))
                failures.append(FailedEffect(name=effect.name, error=str(e)))
                side_effect_failures.labels(effect=effect.name).inc()
                continue

            if result is False:
                logger.warning("side_effect_failed", effect=effect.name, error="returned False")
                failures.append(FailedEffect(name=effect.name, error="returned False"))
                side_effect_failures.labels(effect=effect.name).inc()

        return failures
