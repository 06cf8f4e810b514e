from datetime import timedelta, timezone

from sleeptrack.api.schemas.profile import UserProfile
from sleeptrack.api.schemas.session import DreamAnalysis, DreamLogRequest, SessionLogRequest
from sleeptrack.core.recorder import (
    DREAM_SESSION_NOTE,
    DREAM_STRATEGY,
    SLIDER_STRATEGY,
    UNSPECIFIED_CAFFEINE,
    build_dream_session,
    build_manual_session,
    record_manual_session,
)
from sleeptrack.core.units import local_today


class TestSliderStrategy:
    def test_eight_hours_at_eighty_percent(self):
        stages = SLIDER_STRATEGY.stages(480, 80)
        assert (stages.deep, stages.rem, stages.light, stages.awake) == (77, 96, 240, 67)
        assert stages.deep + stages.rem + stages.light + stages.awake == 480

    def test_awake_never_negative(self):
        stages = SLIDER_STRATEGY.stages(0, 100)
        assert stages.awake == 0

    def test_full_quality_leaves_little_awake_time(self):
        stages = SLIDER_STRATEGY.stages(600, 100)
        assert (stages.deep, stages.rem, stages.light, stages.awake) == (120, 150, 300, 30)


class TestDreamStrategy:
    def test_six_hours(self):
        stages = DREAM_STRATEGY.stages(360)
        assert (stages.deep, stages.rem, stages.light, stages.awake) == (54, 126, 162, 18)
        assert DREAM_STRATEGY.quality == 80

    def test_ignores_quality(self):
        assert DREAM_STRATEGY.stages(360, 10) == DREAM_STRATEGY.stages(360)


def test_manual_session_fields():
    session = build_manual_session(
        SessionLogRequest(duration_hours=8, quality=80, pre_sleep_activity=["Reading"]),
    )
    assert session.duration_minutes == 480
    assert session.quality == 80
    assert session.stages.deep == 77
    assert session.noise_events == 0
    assert session.caffeine_intake == UNSPECIFIED_CAFFEINE
    assert session.pre_sleep_activity == ["Reading"]
    assert session.dream_notes is None
    assert session.date == local_today()


def test_manual_session_uses_local_calendar_date():
    far_east = timezone(timedelta(hours=14))
    session = build_manual_session(SessionLogRequest(), tz=far_east)
    assert session.date == local_today(far_east)


def test_dream_session():
    analysis = DreamAnalysis(interpretation="Flying means freedom.", themes=["freedom"])
    session = build_dream_session(
        DreamLogRequest(dream_text="I was flying", duration_hours=6, dream_analysis=analysis),
    )
    assert session.duration_minutes == 360
    assert session.quality == 80
    assert session.stages.rem == 126
    assert session.dream_notes == "I was flying"
    assert session.dream_analysis == analysis
    assert session.ai_analysis == DREAM_SESSION_NOTE


def test_record_attaches_narrative_and_passes_profile():
    seen = {}

    def analyze(session, profile):
        seen["profile"] = profile
        return "Solid night."

    profile = UserProfile(age="30")
    session = record_manual_session(SessionLogRequest(duration_hours=7, quality=60), profile, analyze)
    assert session.ai_analysis == "Solid night."
    assert seen["profile"] is profile
    assert session.duration_minutes == 420
