from typing import Literal

from pydantic import BaseModel

from .profile import UserProfile


class MetricsDisplay(BaseModel):
    quality: str
    duration: str
    deep_sleep: str
    efficiency: str


class ChartPoint(BaseModel):
    date: str
    label: str  # short display form, e.g. "Jan 15"
    duration_minutes: int
    quality: int


class DashboardResponse(BaseModel):
    greeting_name: str
    source: Literal["sessions", "profile", "none"]
    metrics: MetricsDisplay
    chart: list[ChartPoint]
    is_assessment_data: bool
    profile: UserProfile | None = None
