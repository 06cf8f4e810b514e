from typing import Literal

from pydantic import BaseModel, Field, field_validator


CaffeineIntake = Literal["None", "1-2 cups", "3+ cups"]
PreSleepActivity = Literal["Screen Time", "Reading", "Late Meal", "Workout"]


class SleepStages(BaseModel):
    awake: int
    light: int
    deep: int
    rem: int


class DreamAnalysis(BaseModel):
    interpretation: str
    themes: list[str]


class SleepSession(BaseModel):
    id: str
    date: str  # YYYY-MM-DD in the user's local calendar
    duration_minutes: int = Field(ge=0)
    quality: int = Field(ge=0, le=100)
    stages: SleepStages
    noise_events: int = 0
    dream_notes: str | None = None
    dream_analysis: DreamAnalysis | None = None
    ai_analysis: str | None = None
    caffeine_intake: str | None = None
    pre_sleep_activity: list[str] | None = None


def check_half_hour_steps(value: float) -> float:
    if value * 2 != int(value * 2):
        raise ValueError("duration_hours must be a multiple of 0.5")
    return value


class SessionLogRequest(BaseModel):
    duration_hours: float = Field(7.5, ge=0, le=14)
    quality: int = Field(75, ge=0, le=100)
    dream_notes: str | None = None
    caffeine_intake: CaffeineIntake | None = None
    pre_sleep_activity: list[PreSleepActivity] = Field(default_factory=list)

    @field_validator("duration_hours")
    @classmethod
    def _half_hour_steps(cls, value: float) -> float:
        return check_half_hour_steps(value)


class DreamInterpretRequest(BaseModel):
    dream_text: str = Field(min_length=1)

    @field_validator("dream_text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("dream_text must not be blank")
        return value


class DreamLogRequest(DreamInterpretRequest):
    duration_hours: float = Field(7.5, ge=0, le=14)
    dream_analysis: DreamAnalysis

    @field_validator("duration_hours")
    @classmethod
    def _half_hour_steps(cls, value: float) -> float:
        return check_half_hour_steps(value)
