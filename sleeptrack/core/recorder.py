"""Turns manual sleep logs and dream entries into sessions.

There is no sensor data, so sleep stages are estimated from duration and
quality by one of two named strategies.
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Callable
from uuid import uuid4

from sleeptrack.api.schemas.profile import UserProfile
from sleeptrack.api.schemas.session import (
    DreamLogRequest,
    SessionLogRequest,
    SleepSession,
    SleepStages,
)

from .units import local_today, round_half_up


logger = logging.getLogger(__name__)


UNSPECIFIED_CAFFEINE = "Not specified"
DREAM_SESSION_NOTE = "Logged via Dream Scape"


class SliderStageStrategy:
    """Deep and REM shrink with the quality score; light is a fixed half.

    Awake is whatever is left, never negative.
    """

    name = "slider"
    deep_share = 0.20
    rem_share = 0.25
    light_share = 0.50

    def stages(self, duration_minutes: float, quality: int) -> SleepStages:
        scale = quality / 100
        deep = round_half_up(duration_minutes * self.deep_share * scale)
        rem = round_half_up(duration_minutes * self.rem_share * scale)
        light = round_half_up(duration_minutes * self.light_share)
        awake = max(0, round_half_up(duration_minutes - deep - rem - light))
        return SleepStages(awake=awake, light=light, deep=deep, rem=rem)


class DreamStageStrategy:
    """Fixed REM-heavy split for nights reconstructed from a dream entry."""

    name = "dream"
    quality = 80
    deep_share = 0.15
    rem_share = 0.35
    light_share = 0.45
    awake_share = 0.05

    def stages(self, duration_minutes: float, quality: int | None = None) -> SleepStages:
        return SleepStages(
            awake=round_half_up(duration_minutes * self.awake_share),
            light=round_half_up(duration_minutes * self.light_share),
            deep=round_half_up(duration_minutes * self.deep_share),
            rem=round_half_up(duration_minutes * self.rem_share),
        )


SLIDER_STRATEGY = SliderStageStrategy()
DREAM_STRATEGY = DreamStageStrategy()


def _new_session_id() -> str:
    return uuid4().hex


def build_manual_session(entry: SessionLogRequest, tz: tzinfo | None = None) -> SleepSession:
    total_minutes = entry.duration_hours * 60
    return SleepSession(
        id=_new_session_id(),
        date=local_today(tz),
        duration_minutes=round_half_up(total_minutes),
        quality=entry.quality,
        stages=SLIDER_STRATEGY.stages(total_minutes, entry.quality),
        dream_notes=entry.dream_notes or None,
        caffeine_intake=entry.caffeine_intake or UNSPECIFIED_CAFFEINE,
        pre_sleep_activity=list(entry.pre_sleep_activity),
    )


def build_dream_session(entry: DreamLogRequest, tz: tzinfo | None = None) -> SleepSession:
    total_minutes = entry.duration_hours * 60
    return SleepSession(
        id=_new_session_id(),
        date=local_today(tz),
        duration_minutes=round_half_up(total_minutes),
        quality=DREAM_STRATEGY.quality,
        stages=DREAM_STRATEGY.stages(total_minutes),
        dream_notes=entry.dream_text,
        dream_analysis=entry.dream_analysis,
        ai_analysis=DREAM_SESSION_NOTE,
    )


def record_manual_session(
    entry: SessionLogRequest,
    profile: UserProfile | None,
    analyze: Callable[[SleepSession, UserProfile | None], str],
    tz: tzinfo | None = None,
) -> SleepSession:
    """Build the session and attach the advisor's narrative.

    ``analyze`` resolves to a fallback text on failure, so the logged night is
    always returned.
    """
    session = build_manual_session(entry, tz)
    analysis = analyze(session, profile)
    logger.info("Recorded session %s (%d min, quality %d)", session.id, session.duration_minutes, session.quality)
    return session.model_copy(update={"ai_analysis": analysis})
