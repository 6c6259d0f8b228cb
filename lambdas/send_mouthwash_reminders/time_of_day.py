"""
Time-of-Day Selection for Mouthwash Reminders

The same Lambda runs on a morning and an evening schedule. Each run only
notifies reminders tagged with the slot it was invoked for.

Resolution order for the slot:
1. timeOfDay (or time_of_day) in the request payload
2. The configured default (TIME_OF_DAY)
3. "morning"
"""

from typing import Any, Sequence

import structlog

from reminders.models.reminders import MouthwashReminder

log = structlog.get_logger()

FALLBACK_TIME_OF_DAY = "morning"
PAYLOAD_KEYS = ("timeOfDay", "time_of_day")


def resolve_time_of_day(payload: dict[str, Any], default: str | None = None) -> str:
    """
    Pick the time-of-day slot for this run.

    Args:
        payload: Parsed request parameters (may be empty)
        default: Configured default slot

    Returns:
        Slot tag to filter on
    """
    for key in PAYLOAD_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()

    if default and default.strip():
        return default.strip()

    return FALLBACK_TIME_OF_DAY


def filter_by_time_of_day(
    reminders: Sequence[MouthwashReminder],
    time_of_day: str,
) -> list[MouthwashReminder]:
    """Reminders tagged with exactly this slot, in their original order."""
    selected = [r for r in reminders if r.time_of_day == time_of_day]

    log.debug(
        "mouthwash_reminders_filtered",
        time_of_day=time_of_day,
        total=len(reminders),
        selected=len(selected),
    )

    return selected
