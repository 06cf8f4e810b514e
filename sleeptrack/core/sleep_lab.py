"""Sleep cycle and sleep debt calculators."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import List

from sleeptrack.api.schemas.lab import BedtimeSuggestion, SleepDebtResponse


CYCLE_MINUTES = 90
FALL_ASLEEP_MINUTES = 15
CYCLE_COUNTS = (6, 5, 4, 3)
MAKEUP_MINUTES_PER_DAY = 20


def parse_wake_time(value: str) -> tuple[int, int]:
    try:
        hours, minutes = (int(part) for part in value.split(":"))
    except ValueError:
        raise ValueError(f"Wake time must be HH:MM, got {value!r}") from None
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Wake time out of range: {value!r}")
    return hours, minutes


def suggest_bedtimes(wake_time: str, now: datetime | None = None) -> List[BedtimeSuggestion]:
    """Bedtimes that end on a full cycle at ``wake_time``, longest night first.

    A wake time already past today is taken to mean tomorrow.
    """
    now = now or datetime.now()
    hours, minutes = parse_wake_time(wake_time)
    wake = now.replace(hour=hours, minute=minutes, second=0, microsecond=0)
    if wake < now:
        wake += timedelta(days=1)

    suggestions = []
    for cycles in CYCLE_COUNTS:
        bedtime = wake - timedelta(minutes=cycles * CYCLE_MINUTES + FALL_ASLEEP_MINUTES)
        suggestions.append(
            BedtimeSuggestion(
                cycles=cycles,
                sleep_hours=cycles * CYCLE_MINUTES / 60,
                bedtime=bedtime.strftime("%H:%M"),
            )
        )
    return suggestions


def sleep_debt(needed_hours: float, actual_hours: float) -> SleepDebtResponse:
    debt = needed_hours - actual_hours
    if debt <= 0:
        return SleepDebtResponse(
            debt_hours=0,
            makeup_days=0,
            message="You are sleep positive! Keep maintaining this schedule.",
        )
    makeup_days = math.ceil(debt * 60 / MAKEUP_MINUTES_PER_DAY)
    return SleepDebtResponse(
        debt_hours=debt,
        makeup_days=makeup_days,
        message=(
            f"You have a sleep debt of {debt:g} hours. Try going to bed "
            f"{MAKEUP_MINUTES_PER_DAY} minutes earlier for the next {makeup_days} days to recover."
        ),
    )
