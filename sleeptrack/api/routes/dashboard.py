from fastapi import APIRouter, Depends

from ..deps import get_user_state
from ..schemas.dashboard import DashboardResponse
from ...core.metrics import build_chart_series, compute_metrics
from ...core.state import UserState


router = APIRouter(tags=["dashboard"])


@router.get("/{user_id}", response_model=DashboardResponse, summary="Sleep metrics and trend chart")
def get_dashboard(user_state: UserState = Depends(get_user_state)) -> DashboardResponse:
    user = user_state.user
    metrics = compute_metrics(user_state.sessions, user.profile)
    series = build_chart_series(user_state.sessions, user.assessment_history)
    return DashboardResponse(
        greeting_name=user.name.split(" ")[0],
        source=metrics.source,
        metrics=metrics.display(),
        chart=series.points,
        is_assessment_data=series.is_assessment_data,
        profile=user.profile,
    )
