from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.routes.auth import router as auth_router
from .api.routes.coach import router as coach_router
from .api.routes.dashboard import router as dashboard_router
from .api.routes.lab import router as lab_router
from .api.routes.onboarding import router as onboarding_router
from .api.routes.sessions import router as sessions_router
from .core.config import Settings
from .core.errors import FlowBusy, InvalidAnswer, OnboardingNotActive, UserNotFound
from .core.llm import initialize_env
from .core.logging import setup_logging
from .core.state import AppState


_ERROR_STATUS = {
    UserNotFound: 404,
    FlowBusy: 409,
    OnboardingNotActive: 409,
    InvalidAnswer: 422,
}


def _register_error_handlers(application: FastAPI) -> None:
    for error, status_code in _ERROR_STATUS.items():

        def handler(request: Request, exc: Exception, status_code: int = status_code) -> JSONResponse:
            return JSONResponse(status_code=status_code, content={"detail": str(exc)})

        application.add_exception_handler(error, handler)


def create_app() -> FastAPI:
    initialize_env()
    settings = Settings.from_env()
    setup_logging(settings.log_format, settings.log_level)

    application = FastAPI(title="SleepTrack AI API", version="0.1.0")
    application.state.sleep = AppState()
    _register_error_handlers(application)

    # Routers
    application.include_router(auth_router, prefix="/api")
    application.include_router(onboarding_router, prefix="/api/onboarding")
    application.include_router(sessions_router, prefix="/api")
    application.include_router(dashboard_router, prefix="/api/dashboard")
    application.include_router(coach_router, prefix="/api/coach")
    application.include_router(lab_router, prefix="/api/lab")

    return application
