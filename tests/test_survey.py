import pytest

from sleeptrack.api.schemas.profile import UserProfile
from sleeptrack.core.errors import InvalidAnswer
from sleeptrack.core.survey import (
    BASELINE_QUESTIONS,
    EXTENDED_QUESTIONS,
    ConditionalGroup,
    MultiSelect,
    get_questionnaire,
    is_complete,
)


def _by_key(questions, key):
    return next(q for q in questions if q.key == key)


def test_question_counts():
    assert len(BASELINE_QUESTIONS) == 7
    assert len(EXTENDED_QUESTIONS) == 13


def test_unknown_variant_is_rejected():
    with pytest.raises(ValueError):
        get_questionnaire("short")


def test_single_select_needs_an_answer():
    gender = _by_key(BASELINE_QUESTIONS, "gender")
    assert not gender.is_valid(UserProfile())
    assert gender.is_valid(UserProfile(gender="Female"))


def test_single_select_rejects_values_outside_options():
    gender = _by_key(BASELINE_QUESTIONS, "gender")
    with pytest.raises(InvalidAnswer):
        gender.check_answer(UserProfile(), "gender", "Robot")


def test_age_only_checks_presence():
    age = _by_key(BASELINE_QUESTIONS, "age")
    assert not age.is_valid(UserProfile())
    assert age.is_valid(UserProfile(age="250"))


def test_sleep_environment_allows_no_selection():
    environment = _by_key(EXTENDED_QUESTIONS, "sleep_environment")
    assert isinstance(environment, MultiSelect)
    assert environment.is_valid(UserProfile())
    assert not environment.required


def test_sleep_issues_require_one_selection():
    issues = _by_key(BASELINE_QUESTIONS, "sleep_issues")
    assert not issues.is_valid(UserProfile())
    assert issues.is_valid(UserProfile(sleep_issues=["None"]))


class TestConditionalGroup:
    def setup_method(self):
        self.caffeine = _by_key(EXTENDED_QUESTIONS, "caffeine_yesterday")
        assert isinstance(self.caffeine, ConditionalGroup)

    def test_unanswered_gate_is_invalid(self):
        assert not self.caffeine.is_valid(UserProfile())

    def test_no_is_valid_on_its_own(self):
        assert self.caffeine.is_valid(UserProfile(caffeine_yesterday="No"))

    def test_yes_requires_every_follow_up(self):
        partial = UserProfile(caffeine_yesterday="Yes", caffeine_last_cup="Morning")
        assert not self.caffeine.is_valid(partial)
        full = partial.model_copy(update={"caffeine_total_intake": "1 cup"})
        assert self.caffeine.is_valid(full)

    def test_follow_up_locked_until_gate_unlocks(self):
        with pytest.raises(InvalidAnswer):
            self.caffeine.check_answer(UserProfile(caffeine_yesterday="No"), "caffeine_last_cup", "Morning")
        self.caffeine.check_answer(UserProfile(caffeine_yesterday="Yes"), "caffeine_last_cup", "Morning")

    def test_hidden_fields_follow_the_gate(self):
        assert self.caffeine.hidden_fields(UserProfile(caffeine_yesterday="No")) == (
            "caffeine_last_cup",
            "caffeine_total_intake",
        )
        assert self.caffeine.hidden_fields(UserProfile(caffeine_yesterday="Yes")) == ()


def test_is_complete_for_baseline_profile():
    profile = UserProfile(
        age="30",
        gender="Male",
        daily_caffeine="1 Cup",
        screen_time="< 30 mins",
        typical_bedtime_routine=["Reading"],
        average_sleep_duration="7-8 hours",
        sleep_issues=["None"],
    )
    assert is_complete(profile)
    assert not is_complete(profile.model_copy(update={"typical_bedtime_routine": []}))


def test_describe_includes_follow_ups():
    view = _by_key(EXTENDED_QUESTIONS, "workout_today").describe()
    assert view["kind"] == "conditional"
    assert [f["key"] for f in view["follow_ups"]] == ["workout_intensity", "workout_timing"]
