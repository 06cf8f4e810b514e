from fastapi import APIRouter, Depends

from ..deps import get_user_state
from ..schemas.coach import ChatMessage, ChatRequest, ChatResponse
from ...core import llm
from ...core.state import Flow, UserState, append_chat, flow_guard


router = APIRouter(tags=["coach"])


@router.get("/{user_id}", response_model=list[ChatMessage], summary="Coach chat transcript")
def get_transcript(user_state: UserState = Depends(get_user_state)) -> list[ChatMessage]:
    return user_state.chat


@router.post("/{user_id}/chat", response_model=ChatResponse, summary="Send a message to the sleep coach")
def chat(payload: ChatRequest, user_state: UserState = Depends(get_user_state)) -> ChatResponse:
    with flow_guard(user_state, Flow.CHAT):
        prior = list(user_state.chat)
        append_chat(user_state, "user", payload.message)
        reply_text = llm.get_sleep_coach_chat(prior, payload.message, user_state.last_session)
        reply = append_chat(user_state, "model", reply_text)
    return ChatResponse(reply=reply, history=user_state.chat)
