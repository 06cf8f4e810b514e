from datetime import datetime, timezone

import pytest

from sleeptrack.core.errors import InvalidAnswer, OnboardingNotActive
from sleeptrack.core.onboarding import AdvanceResult, OnboardingMachine, OnboardingStatus


FIXED_NOW = datetime(2024, 1, 15, 23, 30, tzinfo=timezone.utc)


def _machine(variant="baseline"):
    return OnboardingMachine(variant, clock=lambda: FIXED_NOW)


def _walk_baseline_to_issues(machine):
    machine.answer("age", "34")
    assert machine.advance() is AdvanceResult.ADVANCED
    machine.answer("gender", "Female")
    machine.advance()
    machine.answer("daily_caffeine", "2-3 Cups")
    machine.advance()
    machine.answer("screen_time", "1-2 hours")
    machine.advance()
    machine.toggle("typical_bedtime_routine", "Reading")
    machine.advance()
    machine.answer("average_sleep_duration", "7-8 hours")
    machine.advance()
    assert machine.step == 6


def test_next_is_blocked_until_the_step_is_answered():
    machine = _machine()
    assert machine.advance() is AdvanceResult.BLOCKED
    assert machine.step == 0
    machine.answer("age", "34")
    assert machine.advance() is AdvanceResult.ADVANCED
    assert machine.step == 1


def test_complete_blocked_without_sleep_issues():
    machine = _machine()
    _walk_baseline_to_issues(machine)
    assert machine.is_last_step
    assert machine.advance() is AdvanceResult.BLOCKED
    assert machine.result is None

    machine.toggle("sleep_issues", "None")
    assert machine.advance() is AdvanceResult.COMPLETED
    assert machine.status is OnboardingStatus.COMPLETED
    assert machine.result.sleep_issues == ["None"]
    assert machine.result.date == "2024-01-15T23:30:00.000Z"


def test_toggle_twice_restores_the_selection():
    machine = _machine()
    machine.answer("age", "20")
    machine.advance()
    for field, value in (("gender", "Male"), ("daily_caffeine", "None"), ("screen_time", "> 2 hours")):
        machine.answer(field, value)
        machine.advance()
    assert machine.current_question.key == "typical_bedtime_routine"
    machine.toggle("typical_bedtime_routine", "Meditation")
    machine.toggle("typical_bedtime_routine", "Shower")
    machine.toggle("typical_bedtime_routine", "Shower")
    assert machine.draft.typical_bedtime_routine == ["Meditation"]
    machine.toggle("typical_bedtime_routine", "Meditation")
    assert machine.draft.typical_bedtime_routine == []


def test_single_select_replaces_previous_answer():
    machine = _machine()
    machine.answer("age", "20")
    machine.advance()
    machine.answer("gender", "Male")
    machine.answer("gender", "Non-binary")
    assert machine.draft.gender == "Non-binary"


def test_answers_must_belong_to_the_current_step():
    machine = _machine()
    with pytest.raises(InvalidAnswer):
        machine.answer("gender", "Male")
    with pytest.raises(InvalidAnswer):
        machine.toggle("age", "20")


def test_back_keeps_later_answers():
    machine = _machine()
    machine.answer("age", "41")
    machine.advance()
    machine.answer("gender", "Male")
    assert machine.back()
    assert machine.step == 0
    assert not machine.back()
    machine.advance()
    assert machine.draft.gender == "Male"
    assert machine.can_advance


def test_cancel_discards_the_draft():
    machine = _machine()
    machine.answer("age", "41")
    machine.cancel()
    assert machine.status is OnboardingStatus.CANCELLED
    assert machine.draft.age == ""
    assert machine.result is None
    with pytest.raises(OnboardingNotActive):
        machine.advance()


def test_result_is_a_frozen_copy():
    machine = _machine()
    _walk_baseline_to_issues(machine)
    machine.toggle("sleep_issues", "Snoring")
    machine.advance()
    machine.draft.sleep_issues.append("Nightmares")
    assert machine.result.sleep_issues == ["Snoring"]


class TestExtendedVariant:
    def _to_caffeine(self):
        machine = _machine("extended")
        machine.answer("age", "29")
        machine.advance()
        machine.answer("gender", "Male")
        machine.advance()
        machine.answer("sleep_last_night_hours", "6")
        machine.advance()
        machine.answer("sleep_quality", "7")
        machine.advance()
        machine.answer("current_feeling", "Alert but tired")
        machine.advance()
        assert machine.current_question.key == "caffeine_yesterday"
        return machine

    def test_minutes_are_optional(self):
        machine = _machine("extended")
        machine.answer("age", "29")
        machine.advance()
        machine.answer("gender", "Male")
        machine.advance()
        assert not machine.can_advance
        machine.answer("sleep_last_night_hours", "6")
        assert machine.can_advance

    def test_yes_gate_requires_follow_ups(self):
        machine = self._to_caffeine()
        machine.answer("caffeine_yesterday", "Yes")
        assert machine.advance() is AdvanceResult.BLOCKED
        machine.answer("caffeine_last_cup", "Afternoon")
        assert machine.advance() is AdvanceResult.BLOCKED
        machine.answer("caffeine_total_intake", "2-3 cups")
        assert machine.advance() is AdvanceResult.ADVANCED

    def test_no_gate_advances_and_drops_stale_follow_ups(self):
        machine = self._to_caffeine()
        machine.answer("caffeine_yesterday", "Yes")
        machine.answer("caffeine_last_cup", "Morning")
        machine.answer("caffeine_yesterday", "No")
        assert machine.advance() is AdvanceResult.ADVANCED

        for gate in ("alcohol_yesterday", "ate_within_3_hours", "workout_today"):
            machine.answer(gate, "No")
            machine.advance()
        machine.answer("screen_time", "No screen time")
        machine.advance()
        machine.toggle("typical_bedtime_routine", "Shower")
        machine.advance()
        assert machine.current_question.key == "sleep_environment"
        assert machine.advance() is AdvanceResult.ADVANCED
        machine.toggle("sleep_issues", "Snoring")
        assert machine.advance() is AdvanceResult.COMPLETED

        assert machine.result.caffeine_yesterday == "No"
        assert machine.result.caffeine_last_cup is None
        assert machine.draft.caffeine_last_cup == "Morning"


def test_progress_reports_the_current_step():
    machine = _machine()
    progress = machine.progress()
    assert (progress["step"], progress["total"], progress["can_advance"]) == (0, 7, False)
    assert progress["question"]["key"] == "age"

    machine.answer("age", "34")
    machine.advance()
    progress = machine.progress()
    assert (progress["step"], progress["can_advance"], progress["is_last"]) == (1, False, False)
    assert progress["profile"].age == "34"
