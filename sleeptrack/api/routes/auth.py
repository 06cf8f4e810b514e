from fastapi import APIRouter, Depends

from ..deps import get_app_state, get_user_state
from ..schemas.profile import User
from ...core.auth import demo_login, guest_login
from ...core.state import AppState, UserState


router = APIRouter(tags=["auth"])


@router.post("/auth/guest", response_model=User, summary="Continue as guest")
def login_guest(state: AppState = Depends(get_app_state)) -> User:
    return state.register(guest_login()).user


@router.post("/auth/demo", response_model=User, summary="Sign in with the demo account")
def login_demo(state: AppState = Depends(get_app_state)) -> User:
    return state.register(demo_login()).user


@router.post("/auth/{user_id}/logout", summary="Sign out and discard in-memory data")
def logout(user_id: str, state: AppState = Depends(get_app_state)) -> dict:
    state.drop(user_id)
    return {"status": "ok"}


@router.get("/users/{user_id}", response_model=User, summary="Current user with assessment history")
def get_user(user_state: UserState = Depends(get_user_state)) -> User:
    return user_state.user
