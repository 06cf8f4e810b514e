from datetime import datetime

import pytest

from sleeptrack.core.sleep_lab import sleep_debt, suggest_bedtimes


def test_bedtimes_count_back_full_cycles():
    now = datetime(2024, 1, 15, 21, 0)
    suggestions = suggest_bedtimes("07:00", now)
    assert [s.cycles for s in suggestions] == [6, 5, 4, 3]
    assert [s.bedtime for s in suggestions] == ["21:45", "23:15", "00:45", "02:15"]
    assert suggestions[1].sleep_hours == 7.5


def test_wake_time_earlier_today_means_tomorrow():
    now = datetime(2024, 1, 15, 8, 0)
    assert suggest_bedtimes("07:00", now)[0].bedtime == "21:45"


@pytest.mark.parametrize("value", ["7am", "25:00", "07:60", ""])
def test_invalid_wake_time(value):
    with pytest.raises(ValueError):
        suggest_bedtimes(value)


def test_no_debt():
    result = sleep_debt(8, 9)
    assert result.makeup_days == 0
    assert result.message.startswith("You are sleep positive")


def test_debt_recovery_plan():
    result = sleep_debt(8, 6)
    assert result.debt_hours == 2
    assert result.makeup_days == 6
    assert "sleep debt of 2 hours" in result.message
    assert "next 6 days" in result.message


def test_fractional_debt_rounds_days_up():
    result = sleep_debt(8, 6.5)
    assert result.makeup_days == 5
    assert "1.5 hours" in result.message
