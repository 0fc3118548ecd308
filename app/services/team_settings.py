from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.models.team_settings import TeamSettings
from app.schemas.team_settings import TeamSettingsUpdate
from app.services.common import commit_or_raise, require_admin

logger = logging.getLogger(__name__)


class TeamSettingsService:
    @staticmethod
    def get(db: Session) -> TeamSettings:
        """Return the single settings row, creating it from configured defaults."""
        row = db.query(TeamSettings).order_by(TeamSettings.created_at.asc()).first()
        if row is None:
            row = TeamSettings(
                commission_threshold_pkr=settings.default_commission_threshold_pkr,
                nots_target_per_client=settings.default_nots_target_per_client,
            )
            db.add(row)
            commit_or_raise(db, "Failed to create team settings")
            db.refresh(row)
        return row

    @staticmethod
    def commission_threshold(db: Session) -> float:
        row = db.query(TeamSettings).order_by(TeamSettings.created_at.asc()).first()
        if row is None:
            return settings.default_commission_threshold_pkr
        return float(row.commission_threshold_pkr)

    @staticmethod
    def update(db: Session, payload: TeamSettingsUpdate, is_admin: bool) -> TeamSettings:
        require_admin(is_admin)
        row = TeamSettingsService.get(db)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(row, field, value)
        commit_or_raise(db, "Failed to update team settings")
        db.refresh(row)
        logger.info(
            "Team settings updated: threshold=%s target=%s",
            row.commission_threshold_pkr,
            row.nots_target_per_client,
        )
        return row


team_settings = TeamSettingsService()
