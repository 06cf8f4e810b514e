"""Onboarding questionnaires.

A question is one of four small variants: single-select, multi-select, free
text and a yes/no gate with follow-up questions. Every variant knows which
profile fields it writes, which answers it accepts and whether a draft
profile satisfies it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

from sleeptrack.api.schemas.profile import UserProfile

from .errors import InvalidAnswer


def _answer(profile: UserProfile, field: str) -> Any:
    return getattr(profile, field, None)


@dataclass(frozen=True)
class SingleSelect:
    key: str
    title: str
    options: Tuple[str, ...]
    required: bool = True

    kind = "single"

    @property
    def fields(self) -> Tuple[str, ...]:
        return (self.key,)

    def is_valid(self, profile: UserProfile) -> bool:
        return bool(_answer(profile, self.key)) or not self.required

    def check_answer(self, profile: UserProfile, field: str, value: str) -> None:
        if field != self.key:
            raise InvalidAnswer(f"{field!r} is not asked by {self.key!r}")
        if value not in self.options:
            raise InvalidAnswer(f"{value!r} is not an option for {self.key!r}")

    def check_toggle(self, profile: UserProfile, field: str, item: str) -> None:
        raise InvalidAnswer(f"{self.key!r} is single-select; answer it instead")

    def hidden_fields(self, profile: UserProfile) -> Tuple[str, ...]:
        return ()

    def describe(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "kind": self.kind,
            "title": self.title,
            "required": self.required,
            "fields": list(self.fields),
            "options": list(self.options),
        }


@dataclass(frozen=True)
class MultiSelect:
    key: str
    title: str
    options: Tuple[str, ...]
    min_selected: int = 1

    kind = "multi"

    @property
    def required(self) -> bool:
        return self.min_selected > 0

    @property
    def fields(self) -> Tuple[str, ...]:
        return (self.key,)

    def is_valid(self, profile: UserProfile) -> bool:
        return len(_answer(profile, self.key) or []) >= self.min_selected

    def check_answer(self, profile: UserProfile, field: str, value: str) -> None:
        raise InvalidAnswer(f"{self.key!r} is multi-select; toggle items instead")

    def check_toggle(self, profile: UserProfile, field: str, item: str) -> None:
        if field != self.key:
            raise InvalidAnswer(f"{field!r} is not asked by {self.key!r}")
        if item not in self.options:
            raise InvalidAnswer(f"{item!r} is not an option for {self.key!r}")

    def hidden_fields(self, profile: UserProfile) -> Tuple[str, ...]:
        return ()

    def describe(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "kind": self.kind,
            "title": self.title,
            "required": self.required,
            "fields": list(self.fields),
            "options": list(self.options),
            "min_selected": self.min_selected,
        }


@dataclass(frozen=True)
class FreeText:
    """Free input over one or more fields; only ``required_fields`` must be filled.

    Presence is the only check; no range is enforced on the value.
    """

    key: str
    title: str
    extra_fields: Tuple[str, ...] = ()

    kind = "text"
    required = True

    @property
    def fields(self) -> Tuple[str, ...]:
        return (self.key,) + self.extra_fields

    def is_valid(self, profile: UserProfile) -> bool:
        return bool(_answer(profile, self.key))

    def check_answer(self, profile: UserProfile, field: str, value: str) -> None:
        if field not in self.fields:
            raise InvalidAnswer(f"{field!r} is not asked by {self.key!r}")

    def check_toggle(self, profile: UserProfile, field: str, item: str) -> None:
        raise InvalidAnswer(f"{self.key!r} takes free text; answer it instead")

    def hidden_fields(self, profile: UserProfile) -> Tuple[str, ...]:
        return ()

    def describe(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "kind": self.kind,
            "title": self.title,
            "required": self.required,
            "fields": list(self.fields),
        }


@dataclass(frozen=True)
class ConditionalGroup:
    """Yes/No gate whose follow-ups only apply when the gate reads ``unlock``.

    Valid when the gate is answered and is not the unlocking literal, or when
    it is and every follow-up is answered as well.
    """

    key: str
    title: str
    follow_ups: Tuple[SingleSelect, ...]
    options: Tuple[str, ...] = ("Yes", "No")
    unlock: str = "Yes"

    kind = "conditional"
    required = True

    @property
    def fields(self) -> Tuple[str, ...]:
        return (self.key,) + tuple(q.key for q in self.follow_ups)

    def unlocked(self, profile: UserProfile) -> bool:
        return _answer(profile, self.key) == self.unlock

    def is_valid(self, profile: UserProfile) -> bool:
        if not _answer(profile, self.key):
            return False
        if not self.unlocked(profile):
            return True
        return all(q.is_valid(profile) for q in self.follow_ups)

    def check_answer(self, profile: UserProfile, field: str, value: str) -> None:
        if field == self.key:
            if value not in self.options:
                raise InvalidAnswer(f"{value!r} is not an option for {self.key!r}")
            return
        for follow_up in self.follow_ups:
            if follow_up.key == field:
                if not self.unlocked(profile):
                    raise InvalidAnswer(f"{field!r} only applies when {self.key!r} is {self.unlock!r}")
                follow_up.check_answer(profile, field, value)
                return
        raise InvalidAnswer(f"{field!r} is not asked by {self.key!r}")

    def check_toggle(self, profile: UserProfile, field: str, item: str) -> None:
        raise InvalidAnswer(f"{self.key!r} is single-select; answer it instead")

    def hidden_fields(self, profile: UserProfile) -> Tuple[str, ...]:
        if self.unlocked(profile):
            return ()
        return tuple(q.key for q in self.follow_ups)

    def describe(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "kind": self.kind,
            "title": self.title,
            "required": self.required,
            "fields": list(self.fields),
            "options": list(self.options),
            "unlock": self.unlock,
            "follow_ups": [q.describe() for q in self.follow_ups],
        }


Question = Union[SingleSelect, MultiSelect, FreeText, ConditionalGroup]


GENDERS = ("Male", "Female", "Non-binary", "Prefer not to say")
DAILY_CAFFEINE = ("None", "1 Cup", "2-3 Cups", "4+ Cups")
SCREEN_TIME = ("No screen time", "< 30 mins", "30-60 mins", "1-2 hours", "> 2 hours")
BEDTIME_ROUTINE = (
    "Reading",
    "Meditation",
    "Shower",
    "Eating",
    "Workout",
    "TV/Movies",
    "Social Media",
    "Nothing specific",
)
SLEEP_DURATIONS = ("< 5 hours", "5-6 hours", "6-7 hours", "7-8 hours", "8+ hours")
NO_SLEEP_ISSUES = "None"
SLEEP_ISSUES = (
    "Trouble falling asleep",
    "Waking up during night",
    "Waking up too early",
    "Snoring",
    "Nightmares",
    NO_SLEEP_ISSUES,
)
SLEEP_ENVIRONMENT = (
    "Dark room",
    "Quiet room",
    "Cool temperature",
    "White noise",
    "Partner in bed",
    "Pets in bed",
)


AGE = FreeText("age", "What is your age?")
GENDER = SingleSelect("gender", "What is your gender?", GENDERS)
CAFFEINE = SingleSelect("daily_caffeine", "Daily Caffeine Intake?", DAILY_CAFFEINE)
SCREENS = SingleSelect("screen_time", "Screen usage before bed?", SCREEN_TIME)
ROUTINE = MultiSelect("typical_bedtime_routine", "What do you usually do before bed?", BEDTIME_ROUTINE)
DURATION = SingleSelect("average_sleep_duration", "Average sleep duration?", SLEEP_DURATIONS)
ISSUES = MultiSelect("sleep_issues", "Do you have any sleep issues?", SLEEP_ISSUES)


BASELINE_QUESTIONS: Tuple[Question, ...] = (
    AGE,
    GENDER,
    CAFFEINE,
    SCREENS,
    ROUTINE,
    DURATION,
    ISSUES,
)

EXTENDED_QUESTIONS: Tuple[Question, ...] = (
    AGE,
    GENDER,
    FreeText(
        "sleep_last_night_hours",
        "How long did you sleep last night?",
        extra_fields=("sleep_last_night_minutes",),
    ),
    SingleSelect(
        "sleep_quality",
        "How would you rate last night's sleep (1-10)?",
        tuple(str(n) for n in range(1, 11)),
    ),
    SingleSelect(
        "current_feeling",
        "How do you feel right now?",
        ("Exhausted", "Alert but tired", "Fully refreshed"),
    ),
    ConditionalGroup(
        "caffeine_yesterday",
        "Did you have caffeine yesterday?",
        follow_ups=(
            SingleSelect(
                "caffeine_last_cup",
                "When was your last cup?",
                ("Morning", "Afternoon", "Within 6hrs of bed"),
            ),
            SingleSelect(
                "caffeine_total_intake",
                "How much in total?",
                ("1 cup", "2-3 cups", "4+"),
            ),
        ),
    ),
    ConditionalGroup(
        "alcohol_yesterday",
        "Did you drink alcohol yesterday?",
        follow_ups=(
            SingleSelect(
                "alcohol_close_to_bed",
                "How close to bedtime?",
                ("With dinner", "Late night", "Within 1hr of bed"),
            ),
        ),
    ),
    ConditionalGroup(
        "ate_within_3_hours",
        "Did you eat within 3 hours of bed?",
        follow_ups=(SingleSelect("meal_type", "What kind of meal?", ("Light", "Heavy", "Sugary")),),
    ),
    ConditionalGroup(
        "workout_today",
        "Did you work out today?",
        follow_ups=(
            SingleSelect("workout_intensity", "How intense was it?", ("Light", "Moderate", "Heavy")),
            SingleSelect("workout_timing", "When did you work out?", ("Morning/Day", "Late Evening")),
        ),
    ),
    SCREENS,
    ROUTINE,
    MultiSelect(
        "sleep_environment",
        "What describes your sleep environment?",
        SLEEP_ENVIRONMENT,
        min_selected=0,
    ),
    ISSUES,
)


QUESTIONNAIRES: Dict[str, Tuple[Question, ...]] = {
    "baseline": BASELINE_QUESTIONS,
    "extended": EXTENDED_QUESTIONS,
}


def get_questionnaire(variant: str) -> Tuple[Question, ...]:
    try:
        return QUESTIONNAIRES[variant]
    except KeyError:
        raise ValueError(f"Unknown questionnaire variant: {variant!r}") from None


def is_complete(profile: UserProfile, questions: Tuple[Question, ...] = BASELINE_QUESTIONS) -> bool:
    return all(q.is_valid(profile) for q in questions)
