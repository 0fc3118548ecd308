from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import actor_label, get_current_user, get_db
from app.schemas.dashboard import BaseEquityRequest, CurrentMonthStats, MonthlyResetRequest, MonthlyStats
from app.services.monthly_reset import MonthlyResetService

router = APIRouter(prefix="/monthly", tags=["monthly"])


def get_monthly_reset_service(db: Session = Depends(get_db), auth=Depends(get_current_user)) -> MonthlyResetService:
    return MonthlyResetService(db, is_admin=auth["is_admin"], actor=actor_label(auth))


@router.post("/base-equity")
def set_monthly_base_equity(
    payload: BaseEquityRequest,
    service: MonthlyResetService = Depends(get_monthly_reset_service),
):
    return {"result": service.set_monthly_base_equity(payload.month, payload.year, payload.base_equity)}


@router.post("/reset")
def reset_monthly_performance(
    payload: MonthlyResetRequest,
    service: MonthlyResetService = Depends(get_monthly_reset_service),
):
    return {"result": service.reset_monthly_performance(payload.new_month, payload.new_year)}


@router.get("/stats", response_model=MonthlyStats | None)
def monthly_stats(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=2020),
    service: MonthlyResetService = Depends(get_monthly_reset_service),
):
    return service.get_monthly_stats(month, year)


@router.get("/current", response_model=CurrentMonthStats)
def current_month_stats(service: MonthlyResetService = Depends(get_monthly_reset_service)):
    return service.get_current_month_stats()
