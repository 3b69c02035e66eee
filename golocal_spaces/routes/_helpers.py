"""Shared helpers for route handlers."""

from typing import Any, Optional

from fastapi import BackgroundTasks

from golocal_spaces.services.side_effects import BestEffortQueue


def success(data: Any, message: Optional[str] = None) -> dict[str, Any]:
    """Wrap a payload in the API success envelope."""
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def schedule_side_effects(background_tasks: BackgroundTasks, side_effects: BestEffortQueue) -> None:
    """Drain a best-effort queue after the response has been sent."""
    if len(side_effects):
        background_tasks.add_task(side_effects.drain)
