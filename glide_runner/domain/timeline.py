"""Stage event helpers for run timelines."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def domain_build_stage_event(
    stage: str,
    status: str,
    job_name: str | None = None,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one structured run timeline event.

    Args:
        stage: Stage name (`run`, `launch`, `poll`, `job`).
        status: Stage status marker.
        job_name: Job the event belongs to, None for run-level events.
        details: Optional structured details object.

    Returns:
        dict[str, object]: JSON-compatible timeline event.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    event_payload: dict[str, object] = {
        "stage": stage,
        "status": status,
        "at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if job_name is not None:
        event_payload["job_name"] = job_name
    if details is not None:
        event_payload["details"] = details
    return event_payload
