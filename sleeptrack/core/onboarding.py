from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict

from sleeptrack.api.schemas.profile import UserProfile

from .errors import OnboardingNotActive
from .survey import Question, get_questionnaire, is_complete


logger = logging.getLogger(__name__)


class AdvanceResult(str, Enum):
    BLOCKED = "blocked"
    ADVANCED = "advanced"
    COMPLETED = "completed"


class OnboardingStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OnboardingMachine:
    """Walks one profile draft through an ordered questionnaire.

    ``advance()`` is a hard gate: it does nothing while the current question is
    unanswered. On the last question it freezes a copy of the draft, stamps it
    with the completion time and stores it in ``result``. Going back keeps every
    answer already given.
    """

    def __init__(self, variant: str = "baseline", clock: Callable[[], datetime] = _utc_now) -> None:
        self.variant = variant
        self.questions = get_questionnaire(variant)
        self.step = 0
        self.draft = UserProfile()
        self.status = OnboardingStatus.ACTIVE
        self.result: UserProfile | None = None
        self._clock = clock

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> Question:
        return self.questions[self.step]

    @property
    def is_last_step(self) -> bool:
        return self.step == self.total - 1

    @property
    def can_advance(self) -> bool:
        return self.status is OnboardingStatus.ACTIVE and self.current_question.is_valid(self.draft)

    def _require_active(self) -> None:
        if self.status is not OnboardingStatus.ACTIVE:
            raise OnboardingNotActive(f"Onboarding is {self.status.value}")

    def answer(self, field: str, value: str) -> None:
        """Set a single-value answer, replacing any previous one."""
        self._require_active()
        self.current_question.check_answer(self.draft, field, value)
        setattr(self.draft, field, value)

    def toggle(self, field: str, item: str) -> None:
        """Add ``item`` to a multi-select answer, or remove it if present."""
        self._require_active()
        self.current_question.check_toggle(self.draft, field, item)
        selected = list(getattr(self.draft, field) or [])
        if item in selected:
            selected.remove(item)
        else:
            selected.append(item)
        setattr(self.draft, field, selected)

    def advance(self) -> AdvanceResult:
        self._require_active()
        if not self.can_advance:
            logger.debug("Step %d (%s) blocked", self.step, self.current_question.key)
            return AdvanceResult.BLOCKED
        if not self.is_last_step:
            self.step += 1
            return AdvanceResult.ADVANCED
        if not is_complete(self.draft, self.questions):
            logger.debug("Draft incomplete at the last step")
            return AdvanceResult.BLOCKED

        self.result = self._finalize()
        self.status = OnboardingStatus.COMPLETED
        logger.info("Onboarding (%s) completed", self.variant)
        return AdvanceResult.COMPLETED

    def back(self) -> bool:
        self._require_active()
        if self.step == 0:
            return False
        self.step -= 1
        return True

    def cancel(self) -> None:
        self._require_active()
        self.status = OnboardingStatus.CANCELLED
        self.draft = UserProfile()

    def _finalize(self) -> UserProfile:
        profile = self.draft.model_copy(deep=True)
        # Follow-ups answered before their gate flipped to "No" are not kept.
        for question in self.questions:
            for field in question.hidden_fields(profile):
                setattr(profile, field, None)
        profile.date = _iso_timestamp(self._clock())
        return profile

    def progress(self) -> Dict[str, Any]:
        return {
            "variant": self.variant,
            "status": self.status.value,
            "step": self.step,
            "total": self.total,
            "is_last": self.is_last_step,
            "can_advance": self.can_advance,
            "question": self.current_question.describe(),
            "profile": self.draft,
        }
