"""Weekly agent evaluations.

An evaluation holds five sub-scores (1 to 5 each). ``total_score`` is their
sum, so it ranges over 5..25, and the band it falls in decides the
performance level and the alert shown for the agent.
"""

from __future__ import annotations

import builtins
import logging
from dataclasses import asdict
from typing import Any

from sqlalchemy.orm import Session, joinedload

from app.config import settings
from app.constants.evaluation_points import CATEGORIES, CORE_CRITERIA, EVALUATION_POINTS
from app.models.agent import Agent
from app.models.evaluation import AgentEvaluation
from app.schemas.evaluation import AgentEvaluationCreate, AgentEvaluationUpdate
from app.services.common import coerce_uuid, commit_or_raise, get_or_404, require_admin

logger = logging.getLogger(__name__)

SCORE_FIELDS = tuple(criterion.score_field for criterion in CORE_CRITERIA)

ADD_UNAUTHORIZED = "Unauthorized: Only admins can add evaluations"
UPDATE_UNAUTHORIZED = "Unauthorized: Only admins can update evaluations"
DELETE_UNAUTHORIZED = "Unauthorized: Only admins can delete evaluations"
WEEK_TAKEN = "An evaluation already exists for this agent and week"

NO_EVALUATION_MESSAGE = "No recent evaluation"

# (upper bound inclusive, level, alert level, message)
_BANDS = (
    (15, "Immediate Coaching", "critical", "Immediate coaching and retraining required"),
    (19, "Needs Improvement", "warning", "Performance needs improvement - additional support recommended"),
    (23, "Strong Performance", "good", "Strong performance - continue current approach"),
    (25, "Excellent", "excellent", "Excellent performance - use as training example"),
)


def performance_band(total_score: int | None) -> tuple[str, str, str]:
    """Return ``(performance_level, alert_level, alert_message)`` for a total."""
    if total_score is None:
        return "No Evaluation", "none", NO_EVALUATION_MESSAGE
    for upper, level, alert_level, message in _BANDS:
        if total_score <= upper:
            return level, alert_level, message
    return _BANDS[-1][1:]


def total_score(values: dict[str, Any]) -> int:
    return sum(int(values[field]) for field in SCORE_FIELDS)


def _serialize(evaluation: AgentEvaluation) -> dict[str, Any]:
    level, _alert_level, message = performance_band(evaluation.total_score)
    data = {column.name: getattr(evaluation, column.name) for column in AgentEvaluation.__table__.columns}
    data["agent_name"] = evaluation.agent.name if evaluation.agent else None
    data["agent_email"] = evaluation.agent.email if evaluation.agent else None
    data["performance_level"] = level
    data["alert_message"] = message
    return data


class Evaluations:
    @staticmethod
    def list(db: Session, agent_id: str | None = None, limit: int | None = None) -> list[dict[str, Any]]:
        query = db.query(AgentEvaluation).options(joinedload(AgentEvaluation.agent))
        if agent_id:
            query = query.filter(AgentEvaluation.agent_id == coerce_uuid(agent_id))
        query = query.order_by(AgentEvaluation.week_start_date.desc(), AgentEvaluation.created_at.desc())
        rows = query.limit(limit or settings.evaluation_list_limit).all()
        return [_serialize(row) for row in rows]

    @staticmethod
    def get(db: Session, evaluation_id: str) -> dict[str, Any]:
        return _serialize(get_or_404(db, AgentEvaluation, evaluation_id, detail="Evaluation not found"))

    @staticmethod
    def create(db: Session, payload: AgentEvaluationCreate, evaluated_by: str, can_manage: bool) -> dict[str, Any]:
        require_admin(can_manage, ADD_UNAUTHORIZED)
        get_or_404(db, Agent, payload.agent_id)
        data = payload.model_dump()
        evaluation = AgentEvaluation(**data, total_score=total_score(data), evaluated_by=evaluated_by)
        db.add(evaluation)
        commit_or_raise(db, "Failed to add evaluation", conflict_detail=WEEK_TAKEN)
        db.refresh(evaluation)
        logger.info(
            "Evaluation %s for agent %s (week %s) scored %s",
            evaluation.id,
            evaluation.agent_id,
            evaluation.week_start_date,
            evaluation.total_score,
        )
        return _serialize(evaluation)

    @staticmethod
    def update(
        db: Session, evaluation_id: str, payload: AgentEvaluationUpdate, can_manage: bool
    ) -> dict[str, Any]:
        require_admin(can_manage, UPDATE_UNAUTHORIZED)
        evaluation = get_or_404(db, AgentEvaluation, evaluation_id, detail="Evaluation not found")
        for field, value in payload.model_dump(exclude_unset=True).items():
            if field in SCORE_FIELDS and value is None:
                continue
            setattr(evaluation, field, value)
        evaluation.total_score = total_score({field: getattr(evaluation, field) for field in SCORE_FIELDS})
        commit_or_raise(db, "Failed to update evaluation")
        db.refresh(evaluation)
        return _serialize(evaluation)

    @staticmethod
    def delete(db: Session, evaluation_id: str, can_manage: bool) -> None:
        require_admin(can_manage, DELETE_UNAUTHORIZED)
        evaluation = get_or_404(db, AgentEvaluation, evaluation_id, detail="Evaluation not found")
        db.delete(evaluation)
        commit_or_raise(db, "Failed to delete evaluation")
        logger.info("Evaluation %s deleted", evaluation_id)

    @staticmethod
    def alerts(db: Session) -> builtins.list[dict[str, Any]]:
        """One alert per active agent from its most recent evaluation, lowest scores first."""
        agents = db.query(Agent).filter(Agent.is_active.is_(True)).order_by(Agent.name.asc()).all()
        alerts = []
        for agent in agents:
            latest = (
                db.query(AgentEvaluation)
                .filter(AgentEvaluation.agent_id == agent.id)
                .order_by(AgentEvaluation.week_start_date.desc(), AgentEvaluation.created_at.desc())
                .first()
            )
            score = latest.total_score if latest else None
            _level, alert_level, message = performance_band(score)
            alerts.append(
                {
                    "agent_id": agent.id,
                    "agent_name": agent.name,
                    "agent_email": agent.email,
                    "total_score": score,
                    "week_start_date": latest.week_start_date if latest else None,
                    "alert_message": message,
                    "alert_level": alert_level,
                }
            )
        alerts.sort(key=lambda item: (item["total_score"] is None, item["total_score"] or 0))
        return alerts

    @staticmethod
    def rubric() -> dict[str, Any]:
        return {
            "categories": list(CATEGORIES),
            "points": [asdict(point) for point in EVALUATION_POINTS],
            "core_criteria": [asdict(criterion) for criterion in CORE_CRITERIA],
        }


evaluations = Evaluations()
