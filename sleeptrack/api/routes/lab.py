from fastapi import APIRouter, HTTPException

from ..schemas.lab import BedtimeResponse, SleepDebtRequest, SleepDebtResponse
from ...core.sleep_lab import sleep_debt, suggest_bedtimes


router = APIRouter(tags=["lab"])


@router.get("/bedtimes", response_model=BedtimeResponse, summary="Smart wake calculator")
def bedtimes(wake_time: str = "07:00") -> BedtimeResponse:
    try:
        suggestions = suggest_bedtimes(wake_time)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return BedtimeResponse(wake_time=wake_time, suggestions=suggestions)


@router.post("/sleep-debt", response_model=SleepDebtResponse, summary="Sleep debt calculator")
def debt(payload: SleepDebtRequest) -> SleepDebtResponse:
    return sleep_debt(payload.needed_hours, payload.actual_hours)
