"""Dashboard metrics and chart series.

Recorded sessions always win over self-reported estimates. With neither, every
metric is the ``NO_DATA`` marker rather than a zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import List, Literal, Sequence

from sleeptrack.api.schemas.dashboard import ChartPoint, MetricsDisplay
from sleeptrack.api.schemas.profile import UserProfile
from sleeptrack.api.schemas.session import SleepSession

from .survey import NO_SLEEP_ISSUES
from .units import format_duration, local_date_label, round_half_up


logger = logging.getLogger(__name__)


NO_DATA = "--"

# Representative minutes for each average-duration answer (bucket midpoints).
DURATION_MINUTES = {
    "< 5 hours": 270,
    "5-6 hours": 330,
    "6-7 hours": 390,
    "7-8 hours": 450,
    "8+ hours": 510,
}
# Unanswered or unknown duration counts as an ordinary eight-hour night.
DEFAULT_DURATION_MINUTES = 480

BASE_ESTIMATED_QUALITY = 85
CAFFEINE_QUALITY_PENALTY = {"2-3 Cups": 5, "4+ Cups": 15}
ISSUE_QUALITY_PENALTY = 8
MIN_ESTIMATED_QUALITY = 40
MAX_ESTIMATED_QUALITY = 95

MAX_SESSION_EFFICIENCY = 98
SESSION_EFFICIENCY_FACTOR = 1.1
ESTIMATED_EFFICIENCY_FACTOR = 1.05
ESTIMATED_DEEP_SLEEP_SHARE = 0.2

# Assessments carry no measured quality; plot them at a neutral level.
ASSESSMENT_CHART_QUALITY = 75

MetricsSource = Literal["sessions", "profile", "none"]


def duration_minutes_for(label: str | None) -> int:
    return DURATION_MINUTES.get(label or "", DEFAULT_DURATION_MINUTES)


def estimate_quality(profile: UserProfile) -> int:
    quality = BASE_ESTIMATED_QUALITY
    quality -= CAFFEINE_QUALITY_PENALTY.get(profile.daily_caffeine, 0)
    issues = [issue for issue in profile.sleep_issues if issue != NO_SLEEP_ISSUES]
    quality -= ISSUE_QUALITY_PENALTY * len(issues)
    return max(MIN_ESTIMATED_QUALITY, min(MAX_ESTIMATED_QUALITY, quality))


@dataclass(frozen=True)
class SleepMetrics:
    source: MetricsSource
    quality_pct: int | None = None
    duration_minutes: int | None = None
    deep_sleep_minutes: int | None = None
    efficiency_pct: int | None = None

    def display(self) -> MetricsDisplay:
        return MetricsDisplay(
            quality=NO_DATA if self.quality_pct is None else f"{self.quality_pct}%",
            duration=NO_DATA if self.duration_minutes is None else format_duration(self.duration_minutes),
            deep_sleep=NO_DATA if self.deep_sleep_minutes is None else f"{self.deep_sleep_minutes}m",
            efficiency=NO_DATA if self.efficiency_pct is None else f"{self.efficiency_pct}%",
        )


def compute_metrics(sessions: Sequence[SleepSession], profile: UserProfile | None) -> SleepMetrics:
    if sessions:
        count = len(sessions)
        avg_quality = round_half_up(sum(s.quality for s in sessions) / count)
        avg_duration = round_half_up(sum(s.duration_minutes for s in sessions) / count)
        return SleepMetrics(
            source="sessions",
            quality_pct=avg_quality,
            duration_minutes=avg_duration,
            deep_sleep_minutes=sessions[-1].stages.deep,
            efficiency_pct=min(MAX_SESSION_EFFICIENCY, round_half_up(avg_quality * SESSION_EFFICIENCY_FACTOR)),
        )

    if profile is not None:
        est_minutes = duration_minutes_for(profile.average_sleep_duration)
        est_quality = estimate_quality(profile)
        return SleepMetrics(
            source="profile",
            quality_pct=est_quality,
            duration_minutes=est_minutes,
            deep_sleep_minutes=round_half_up(est_minutes * ESTIMATED_DEEP_SLEEP_SHARE),
            efficiency_pct=round_half_up(est_quality * ESTIMATED_EFFICIENCY_FACTOR),
        )

    return SleepMetrics(source="none")


@dataclass(frozen=True)
class ChartSeries:
    points: List[ChartPoint]
    is_assessment_data: bool = False


def _assessment_label(profile: UserProfile, position: int, tz: tzinfo | None) -> str:
    if profile.date:
        try:
            return local_date_label(profile.date, tz)
        except ValueError:
            logger.warning("Unparseable assessment timestamp %r", profile.date)
    return f"Assessment {position}"


def build_chart_series(
    sessions: Sequence[SleepSession],
    history: Sequence[UserProfile],
    tz: tzinfo | None = None,
) -> ChartSeries:
    """Trend points from sessions, else from assessments in chronological order."""
    if sessions:
        return ChartSeries(
            points=[
                ChartPoint(
                    date=s.date,
                    label=format_chart_label(s.date),
                    duration_minutes=s.duration_minutes,
                    quality=s.quality,
                )
                for s in sessions
            ]
        )
    if not history:
        return ChartSeries(points=[])

    # History is stored newest first.
    chronological = list(reversed(history))
    points = []
    for index, profile in enumerate(chronological):
        label = _assessment_label(profile, index + 1, tz)
        points.append(
            ChartPoint(
                date=label,
                label=format_chart_label(label),
                duration_minutes=duration_minutes_for(profile.average_sleep_duration),
                quality=ASSESSMENT_CHART_QUALITY,
            )
        )
    return ChartSeries(points=points, is_assessment_data=True)


def format_chart_label(label: str) -> str:
    """``2024-01-15`` -> ``Jan 15``; synthetic labels pass through."""
    if not label or label.startswith("Assessment"):
        return label
    try:
        day = date.fromisoformat(label)
    except ValueError:
        return label
    return f"{day.strftime('%b')} {day.day}"
