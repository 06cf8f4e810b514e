import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    openai_api_key: str | None = None
    advisor_model: str = "gpt-4o-mini"
    # Fail fast: a slow advisory call only delays a fallback message.
    advisor_timeout_seconds: float = 20.0
    advisor_max_retries: int = 0
    log_format: str = "text"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
            advisor_model=os.environ.get("ADVISOR_MODEL", "gpt-4o-mini"),
            advisor_timeout_seconds=float(os.environ.get("ADVISOR_TIMEOUT_SECONDS", "20")),
            advisor_max_retries=int(os.environ.get("ADVISOR_MAX_RETRIES", "0")),
            log_format=os.environ.get("SLEEPTRACK_LOG_FORMAT", "text"),
            log_level=os.environ.get("SLEEPTRACK_LOG_LEVEL", "INFO").upper(),
        )
