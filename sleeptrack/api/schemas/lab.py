from pydantic import BaseModel, Field


class BedtimeSuggestion(BaseModel):
    cycles: int
    sleep_hours: float
    bedtime: str  # HH:MM


class BedtimeResponse(BaseModel):
    wake_time: str
    suggestions: list[BedtimeSuggestion]


class SleepDebtRequest(BaseModel):
    needed_hours: float = Field(8, ge=0, le=24)
    actual_hours: float = Field(6, ge=0, le=24)


class SleepDebtResponse(BaseModel):
    debt_hours: float
    makeup_days: int
    message: str
