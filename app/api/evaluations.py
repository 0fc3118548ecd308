from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import actor_label, get_current_user, get_db
from app.schemas.evaluation import (
    AgentEvaluationCreate,
    AgentEvaluationRead,
    AgentEvaluationUpdate,
    EvaluationAlert,
    EvaluationRubric,
)
from app.services.evaluations import evaluations

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


@router.get("", response_model=list[AgentEvaluationRead])
def list_evaluations(
    agent_id: str | None = None,
    limit: int | None = Query(default=None, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return evaluations.list(db, agent_id=agent_id, limit=limit)


@router.get("/alerts", response_model=list[EvaluationAlert])
def evaluation_alerts(db: Session = Depends(get_db)):
    return evaluations.alerts(db)


@router.get("/rubric", response_model=EvaluationRubric)
def evaluation_rubric():
    return evaluations.rubric()


@router.get("/{evaluation_id}", response_model=AgentEvaluationRead)
def get_evaluation(evaluation_id: str, db: Session = Depends(get_db)):
    return evaluations.get(db, evaluation_id)


@router.post("", response_model=AgentEvaluationRead, status_code=status.HTTP_201_CREATED)
def create_evaluation(
    payload: AgentEvaluationCreate,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return evaluations.create(db, payload, evaluated_by=actor_label(auth), can_manage=auth["is_admin"])


@router.patch("/{evaluation_id}", response_model=AgentEvaluationRead)
def update_evaluation(
    evaluation_id: str,
    payload: AgentEvaluationUpdate,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return evaluations.update(db, evaluation_id, payload, can_manage=auth["is_admin"])


@router.delete("/{evaluation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_evaluation(evaluation_id: str, db: Session = Depends(get_db), auth=Depends(get_current_user)):
    evaluations.delete(db, evaluation_id, can_manage=auth["is_admin"])
