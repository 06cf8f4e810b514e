from fastapi import Request

from ..core.state import AppState, UserState


def get_app_state(request: Request) -> AppState:
    return request.app.state.sleep


def get_user_state(user_id: str, request: Request) -> UserState:
    return get_app_state(request).get(user_id)
