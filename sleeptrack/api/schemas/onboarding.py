from typing import Literal

from pydantic import BaseModel

from .profile import User, UserProfile


class StartOnboardingRequest(BaseModel):
    variant: Literal["baseline", "extended"] = "baseline"


class AnswerRequest(BaseModel):
    field: str
    value: str


class ToggleRequest(BaseModel):
    field: str
    item: str


class QuestionView(BaseModel):
    key: str
    kind: Literal["single", "multi", "text", "conditional"]
    title: str
    required: bool
    fields: list[str]
    options: list[str] = []
    min_selected: int | None = None
    unlock: str | None = None
    follow_ups: list["QuestionView"] = []


class OnboardingStateResponse(BaseModel):
    variant: str
    status: Literal["active", "completed", "cancelled"]
    step: int
    total: int
    is_last: bool
    can_advance: bool
    question: QuestionView
    profile: UserProfile


class AdvanceResponse(BaseModel):
    result: Literal["blocked", "advanced", "completed"]
    state: OnboardingStateResponse | None = None
    user: User | None = None
