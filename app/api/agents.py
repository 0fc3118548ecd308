from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db
from app.schemas.agent import AgentCreate, AgentRead, AgentUpdate, ClientAgentLink
from app.schemas.client import ClientRead
from app.schemas.common import ListResponse
from app.services.agents import agents

router = APIRouter(prefix="/agents", tags=["agents"])


@router.get("", response_model=ListResponse[AgentRead])
def list_agents(
    is_active: bool | None = None,
    search: str | None = None,
    order_by: str = Query(default="name"),
    order_dir: str = Query(default="asc", pattern="^(asc|desc)$"),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return agents.list_response(db, is_active, search, order_by, order_dir, limit, offset)


@router.get("/summary")
def agent_summary(db: Session = Depends(get_db)):
    return agents.summary(db)


@router.get("/performance")
def agent_performance(agent_id: str | None = None, db: Session = Depends(get_db)):
    return agents.performance(db, agent_id)


@router.get("/{agent_id}", response_model=AgentRead)
def get_agent(agent_id: str, db: Session = Depends(get_db)):
    return agents.get(db, agent_id)


@router.get("/{agent_id}/clients", response_model=list[ClientRead])
def agent_clients(agent_id: str, db: Session = Depends(get_db)):
    return agents.clients(db, agent_id)


@router.post("", response_model=AgentRead, status_code=status.HTTP_201_CREATED)
def create_agent(payload: AgentCreate, db: Session = Depends(get_db), auth=Depends(get_current_user)):
    return agents.create(db, payload, is_admin=auth["is_admin"])


@router.patch("/{agent_id}", response_model=AgentRead)
def update_agent(
    agent_id: str,
    payload: AgentUpdate,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return agents.update(db, agent_id, payload, is_admin=auth["is_admin"])


@router.delete("/{agent_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_agent(agent_id: str, db: Session = Depends(get_db), auth=Depends(get_current_user)):
    agents.delete(db, agent_id, is_admin=auth["is_admin"])


@router.post("/{agent_id}/clients")
def link_client(
    agent_id: str,
    payload: ClientAgentLink,
    db: Session = Depends(get_db),
    auth=Depends(get_current_user),
):
    return {"result": agents.link_client(db, payload.client_id, agent_id, is_admin=auth["is_admin"])}


@router.delete("/clients/{client_id}")
def unlink_client(client_id: str, db: Session = Depends(get_db), auth=Depends(get_current_user)):
    return {"result": agents.unlink_client(db, client_id, is_admin=auth["is_admin"])}
