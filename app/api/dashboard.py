from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.dashboard import DashboardOverview
from app.services.dashboard import dashboard

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardOverview)
def dashboard_stats(
    days_back: int | None = Query(default=None, ge=1, le=365),
    db: Session = Depends(get_db),
):
    return dashboard.stats(db, days_back=days_back)
