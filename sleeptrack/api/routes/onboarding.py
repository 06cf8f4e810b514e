from fastapi import APIRouter, Depends, HTTPException

from ..deps import get_user_state
from ..schemas.onboarding import (
    AdvanceResponse,
    AnswerRequest,
    OnboardingStateResponse,
    QuestionView,
    StartOnboardingRequest,
    ToggleRequest,
)
from ...core import llm
from ...core.errors import OnboardingNotActive
from ...core.onboarding import AdvanceResult, OnboardingMachine
from ...core.state import Flow, UserState, complete_assessment, flow_guard
from ...core.survey import get_questionnaire


router = APIRouter(tags=["onboarding"])


def _machine(user_state: UserState) -> OnboardingMachine:
    if user_state.onboarding is None:
        raise OnboardingNotActive("No assessment in progress")
    return user_state.onboarding


def _state(machine: OnboardingMachine) -> OnboardingStateResponse:
    return OnboardingStateResponse(**machine.progress())


@router.get("/questions", response_model=list[QuestionView], summary="Questionnaire catalogue")
def list_questions(variant: str = "baseline") -> list[QuestionView]:
    try:
        questions = get_questionnaire(variant)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return [QuestionView(**q.describe()) for q in questions]


@router.post("/{user_id}/start", response_model=OnboardingStateResponse, summary="Start (or restart) the assessment")
def start_onboarding(
    payload: StartOnboardingRequest | None = None,
    user_state: UserState = Depends(get_user_state),
) -> OnboardingStateResponse:
    variant = payload.variant if payload else "baseline"
    user_state.onboarding = OnboardingMachine(variant)
    return _state(user_state.onboarding)


@router.get("/{user_id}", response_model=OnboardingStateResponse, summary="Current assessment step")
def get_onboarding(user_state: UserState = Depends(get_user_state)) -> OnboardingStateResponse:
    return _state(_machine(user_state))


@router.post("/{user_id}/answer", response_model=OnboardingStateResponse, summary="Answer the current question")
def answer(payload: AnswerRequest, user_state: UserState = Depends(get_user_state)) -> OnboardingStateResponse:
    machine = _machine(user_state)
    machine.answer(payload.field, payload.value)
    return _state(machine)


@router.post("/{user_id}/toggle", response_model=OnboardingStateResponse, summary="Toggle a multi-select item")
def toggle(payload: ToggleRequest, user_state: UserState = Depends(get_user_state)) -> OnboardingStateResponse:
    machine = _machine(user_state)
    machine.toggle(payload.field, payload.item)
    return _state(machine)


@router.post("/{user_id}/back", response_model=OnboardingStateResponse, summary="Return to the previous question")
def back(user_state: UserState = Depends(get_user_state)) -> OnboardingStateResponse:
    machine = _machine(user_state)
    machine.back()
    return _state(machine)


@router.post("/{user_id}/cancel", summary="Abandon the assessment")
def cancel(user_state: UserState = Depends(get_user_state)) -> dict:
    machine = _machine(user_state)
    machine.cancel()
    if user_state.onboarding is machine:
        user_state.onboarding = None
    return {"status": "cancelled"}


@router.post("/{user_id}/next", response_model=AdvanceResponse, summary="Next question, or complete on the last one")
def advance(user_state: UserState = Depends(get_user_state)) -> AdvanceResponse:
    machine = _machine(user_state)
    if not (machine.is_last_step and machine.can_advance):
        result = machine.advance()
        return AdvanceResponse(result=result.value, state=_state(machine))

    with flow_guard(user_state, Flow.PROFILE_ANALYSIS):
        result = machine.advance()
        if result is not AdvanceResult.COMPLETED:
            return AdvanceResponse(result=result.value, state=_state(machine))
        profile = machine.result
        analysis = llm.analyze_user_profile(profile)

    # Leave a machine started during the analysis call in place.
    if user_state.onboarding is machine:
        user_state.onboarding = None
    profile = profile.model_copy(update={"ai_analysis": llm.strip_asterisks(analysis)})
    user = complete_assessment(user_state, profile)
    return AdvanceResponse(result=AdvanceResult.COMPLETED.value, user=user)
