from pydantic import BaseModel, EmailStr, Field


class UserProfile(BaseModel):
    """One questionnaire instance, in progress or completed.

    Baseline answers default to empty values so a fresh draft is always
    serializable; extended answers stay ``None`` until asked.
    """

    date: str | None = None
    age: str = ""
    gender: str = ""
    daily_caffeine: str = ""
    screen_time: str = ""
    typical_bedtime_routine: list[str] = Field(default_factory=list)
    average_sleep_duration: str = ""
    sleep_issues: list[str] = Field(default_factory=list)
    sleep_last_night_hours: str | None = None
    sleep_last_night_minutes: str | None = None
    sleep_quality: str | None = None
    current_feeling: str | None = None
    caffeine_yesterday: str | None = None
    caffeine_last_cup: str | None = None
    caffeine_total_intake: str | None = None
    alcohol_yesterday: str | None = None
    alcohol_close_to_bed: str | None = None
    ate_within_3_hours: str | None = None
    meal_type: str | None = None
    workout_today: str | None = None
    workout_intensity: str | None = None
    workout_timing: str | None = None
    sleep_environment: list[str] | None = None
    ai_analysis: str | None = None


class User(BaseModel):
    id: str
    name: str
    email: EmailStr | None = None
    avatar: str | None = None
    is_guest: bool = False
    profile: UserProfile | None = None
    # Newest first.
    assessment_history: list[UserProfile] = Field(default_factory=list)
