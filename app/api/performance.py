from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.schemas.common import ListResponse
from app.schemas.performance import (
    DailyPerformanceRead,
    MonthlyPerformanceCreate,
    MonthlyPerformanceRead,
    MonthlyPerformanceUpdate,
    MonthlyTeamStats,
)
from app.schemas.team_settings import TeamSettingsRead, TeamSettingsUpdate
from app.services.performance import daily_performance, monthly_performance
from app.services.team_settings import team_settings

router = APIRouter(prefix="/performance", tags=["performance"])


@router.get("/monthly", response_model=ListResponse[MonthlyPerformanceRead])
def list_monthly_performance(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=2020),
    client_id: str | None = None,
    limit: int = Query(default=200, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return monthly_performance.list_response(db, month, year, client_id, limit, offset)


@router.get("/monthly/team-stats", response_model=MonthlyTeamStats | None)
def monthly_team_stats(
    month: int = Query(ge=1, le=12),
    year: int = Query(ge=2020),
    db: Session = Depends(get_db),
):
    return monthly_performance.team_stats(db, month, year)


@router.get("/monthly/{record_id}", response_model=MonthlyPerformanceRead)
def get_monthly_performance(record_id: str, db: Session = Depends(get_db)):
    return monthly_performance.get(db, record_id)


@router.post("/monthly", response_model=MonthlyPerformanceRead, status_code=status.HTTP_201_CREATED)
def create_monthly_performance(
    payload: MonthlyPerformanceCreate,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return monthly_performance.create(db, payload, is_admin=auth["is_admin"])


@router.patch("/monthly/{record_id}", response_model=MonthlyPerformanceRead)
def update_monthly_performance(
    record_id: str,
    payload: MonthlyPerformanceUpdate,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return monthly_performance.update(db, record_id, payload, is_admin=auth["is_admin"])


@router.delete("/monthly/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_monthly_performance(record_id: str, db: Session = Depends(get_db), auth=Depends(get_current_user)):
    monthly_performance.delete(db, record_id, is_admin=auth["is_admin"])


@router.get("/daily", response_model=list[DailyPerformanceRead])
def list_daily_performance(
    client_id: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    limit: int = Query(default=200, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return daily_performance.list(
        db, client_id=client_id, start_date=start_date, end_date=end_date, limit=limit, offset=offset
    )


@router.get("/team-settings", response_model=TeamSettingsRead)
def get_team_settings(db: Session = Depends(get_db)):
    return team_settings.get(db)


@router.patch("/team-settings", response_model=TeamSettingsRead)
def update_team_settings(
    payload: TeamSettingsUpdate,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return team_settings.update(db, payload, is_admin=auth["is_admin"])
