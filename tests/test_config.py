import json
import logging

from sleeptrack.core.config import Settings
from sleeptrack.core.logging import JSONFormatter


def test_settings_defaults():
    settings = Settings.from_env()
    assert settings.openai_api_key is None
    assert settings.advisor_model == "gpt-4o-mini"
    assert settings.advisor_timeout_seconds == 20.0
    assert settings.advisor_max_retries == 0


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("ADVISOR_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("SLEEPTRACK_LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.openai_api_key == "sk-test"
    assert settings.advisor_timeout_seconds == 5.0
    assert settings.log_level == "DEBUG"


def test_blank_key_counts_as_missing(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "")
    assert Settings.from_env().openai_api_key is None


def test_json_formatter_keeps_prefixed_extras():
    record = logging.LogRecord("sleeptrack.core.llm", logging.WARNING, __file__, 1, "chat %s", ("failed",), None)
    record.sleeptrack_user_id = "guest-1"
    record.other = "dropped"
    entry = json.loads(JSONFormatter().format(record))
    assert entry["message"] == "chat failed"
    assert entry["level"] == "WARNING"
    assert entry["sleeptrack_user_id"] == "guest-1"
    assert "other" not in entry
