from fastapi import APIRouter, Depends

from ..deps import get_user_state
from ..schemas.session import (
    DreamAnalysis,
    DreamInterpretRequest,
    DreamLogRequest,
    SessionLogRequest,
    SleepSession,
)
from ...core import llm
from ...core.recorder import build_dream_session, record_manual_session
from ...core.state import Flow, UserState, add_session, flow_guard


router = APIRouter(tags=["sessions"])


@router.get("/sessions/{user_id}", response_model=list[SleepSession], summary="Logged sessions, oldest first")
def list_sessions(user_state: UserState = Depends(get_user_state)) -> list[SleepSession]:
    return user_state.sessions


@router.post("/sessions/{user_id}", response_model=SleepSession, summary="Log last night's sleep")
def log_session(payload: SessionLogRequest, user_state: UserState = Depends(get_user_state)) -> SleepSession:
    with flow_guard(user_state, Flow.SESSION_ANALYSIS):
        session = record_manual_session(payload, user_state.user.profile, llm.analyze_sleep_session)
    return add_session(user_state, session)


@router.post("/dreams/{user_id}/interpret", response_model=DreamAnalysis, summary="Interpret a dream")
def interpret(payload: DreamInterpretRequest, user_state: UserState = Depends(get_user_state)) -> DreamAnalysis:
    with flow_guard(user_state, Flow.DREAM_INTERPRETATION):
        return llm.interpret_dream(payload.dream_text)


@router.post("/dreams/{user_id}", response_model=SleepSession, summary="Save an interpreted dream as a session")
def log_dream(payload: DreamLogRequest, user_state: UserState = Depends(get_user_state)) -> SleepSession:
    return add_session(user_state, build_dream_session(payload))
