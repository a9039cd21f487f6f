"""Update-stage timeline events returned with every update result."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Final

UPDATE_STAGES: Final[frozenset[str]] = frozenset({"update", "query", "savepoint", "cancel", "deploy"})
UPDATE_STAGE_STATUSES: Final[frozenset[str]] = frozenset({"started", "completed", "skipped", "failed", "success"})


def domain_build_stage_event(
    stage: str,
    status: str,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one update-stage event for the result timeline.

    Args:
        stage: One of `UPDATE_STAGES`.
        status: One of `UPDATE_STAGE_STATUSES`.
        details: Optional stage details such as job id or savepoint path.

    Returns:
        dict[str, object]: Event with `stage`, `status`, `at_utc` and, when given, a copy of `details`.

    Raises:
        ValueError: Raised for an unknown stage or status.
    """

    if stage not in UPDATE_STAGES:
        raise ValueError(f"unknown update stage: {stage}")
    if status not in UPDATE_STAGE_STATUSES:
        raise ValueError(f"unknown update stage status: {status}")

    stage_event: dict[str, object] = {
        "stage": stage,
        "status": status,
        "at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        stage_event["details"] = dict(details)
    return stage_event
