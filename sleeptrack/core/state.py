"""In-memory application state and the actions that change it.

``create_app()`` owns a single ``AppState``; routes reach it through a
dependency and change it only through the functions below.
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List
from uuid import uuid4

from sleeptrack.api.schemas.coach import ChatMessage
from sleeptrack.api.schemas.profile import User, UserProfile
from sleeptrack.api.schemas.session import SleepSession

from .errors import FlowBusy, UserNotFound
from .onboarding import OnboardingMachine


logger = logging.getLogger(__name__)


class Flow(str, Enum):
    PROFILE_ANALYSIS = "profile_analysis"
    SESSION_ANALYSIS = "session_analysis"
    CHAT = "chat"
    DREAM_INTERPRETATION = "dream_interpretation"


@dataclass
class UserState:
    user: User
    sessions: List[SleepSession] = field(default_factory=list)
    chat: List[ChatMessage] = field(default_factory=list)
    onboarding: OnboardingMachine | None = None
    in_flight: Dict[Flow, bool] = field(default_factory=lambda: {flow: False for flow in Flow})
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def last_session(self) -> SleepSession | None:
        return self.sessions[-1] if self.sessions else None


@dataclass
class AppState:
    users: Dict[str, UserState] = field(default_factory=dict)

    def register(self, user: User) -> UserState:
        user_state = UserState(user=user)
        self.users[user.id] = user_state
        logger.info("User signed in", extra={"sleeptrack_user_id": user.id, "sleeptrack_guest": user.is_guest})
        return user_state

    def get(self, user_id: str) -> UserState:
        try:
            return self.users[user_id]
        except KeyError:
            raise UserNotFound(user_id) from None

    def drop(self, user_id: str) -> None:
        self.get(user_id)
        del self.users[user_id]


@contextmanager
def flow_guard(user_state: UserState, flow: Flow) -> Iterator[None]:
    """Hold the in-flight flag of ``flow`` for one advisory request."""
    with user_state._lock:
        if user_state.in_flight[flow]:
            raise FlowBusy(flow.value)
        user_state.in_flight[flow] = True
    try:
        yield
    finally:
        with user_state._lock:
            user_state.in_flight[flow] = False


def add_session(user_state: UserState, session: SleepSession) -> SleepSession:
    user_state.sessions.append(session)
    return session


def complete_assessment(user_state: UserState, profile: UserProfile) -> User:
    """Put a finished profile at the head of the history and make it current."""
    user = user_state.user
    history = [profile] + list(user.assessment_history)
    user_state.user = user.model_copy(
        update={"profile": profile.model_copy(), "assessment_history": history}
    )
    return user_state.user


def append_chat(user_state: UserState, role: str, text: str) -> ChatMessage:
    message = ChatMessage(id=uuid4().hex, role=role, text=text, timestamp=int(time.time() * 1000))
    user_state.chat.append(message)
    return message
