from __future__ import annotations

import builtins
import logging
from typing import Any

from sqlalchemy.orm import Session

from app.models.agent import Agent
from app.models.client import Client
from app.schemas.agent import AgentCreate, AgentUpdate
from app.services import data_service
from app.services.common import (
    apply_ordering,
    apply_pagination,
    coerce_uuid,
    commit_or_raise,
    get_or_404,
    require_admin,
)
from app.services.response import ListResponseMixin

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "An agent with this email already exists"


class Agents(ListResponseMixin):
    @staticmethod
    def list(
        db: Session,
        is_active: bool | None = None,
        search: str | None = None,
        order_by: str = "name",
        order_dir: str = "asc",
        limit: int = 50,
        offset: int = 0,
    ) -> list[Agent]:
        query = db.query(Agent)
        if is_active is not None:
            query = query.filter(Agent.is_active.is_(is_active))
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(Agent.name.ilike(pattern) | Agent.email.ilike(pattern))
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {"name": Agent.name, "email": Agent.email, "created_at": Agent.created_at},
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def get(db: Session, agent_id: str) -> Agent:
        return get_or_404(db, Agent, agent_id)

    @staticmethod
    def create(db: Session, payload: AgentCreate, is_admin: bool) -> Agent:
        require_admin(is_admin)
        data = payload.model_dump()
        data["email"] = data["email"].strip().lower()
        agent = Agent(**data)
        db.add(agent)
        commit_or_raise(db, "Failed to add agent", conflict_detail=EMAIL_TAKEN)
        db.refresh(agent)
        logger.info("Agent %s created", agent.id)
        return agent

    @staticmethod
    def update(db: Session, agent_id: str, payload: AgentUpdate, is_admin: bool) -> Agent:
        require_admin(is_admin)
        agent = get_or_404(db, Agent, agent_id)
        data = payload.model_dump(exclude_unset=True)
        if data.get("email"):
            data["email"] = data["email"].strip().lower()
        for field, value in data.items():
            setattr(agent, field, value)
        commit_or_raise(db, "Failed to update agent", conflict_detail=EMAIL_TAKEN)
        db.refresh(agent)
        return agent

    @staticmethod
    def delete(db: Session, agent_id: str, is_admin: bool) -> None:
        require_admin(is_admin)
        agent = get_or_404(db, Agent, agent_id)
        db.delete(agent)
        commit_or_raise(db, "Failed to delete agent")
        logger.info("Agent %s deleted", agent_id)

    @staticmethod
    def summary(db: Session) -> builtins.list[dict[str, Any]]:
        """Per-agent totals from ``agent_performance_summary``, best earners first."""
        with data_service.fallback_message("Failed to load agents"):
            return data_service.select_rows(
                db, "agent_performance_summary", order_by="total_client_revenue", descending=True
            )

    @staticmethod
    def link_client(db: Session, client_id: str, agent_id: str, is_admin: bool) -> Any:
        require_admin(is_admin)
        params = {"p_client_id": coerce_uuid(client_id), "p_agent_id": coerce_uuid(agent_id)}
        with data_service.fallback_message("Failed to link client to agent"):
            result = data_service.rpc(db, "link_client_to_agent", params, commit=True)
        logger.info("Client %s linked to agent %s", client_id, agent_id)
        return result

    @staticmethod
    def unlink_client(db: Session, client_id: str, is_admin: bool) -> Any:
        require_admin(is_admin)
        with data_service.fallback_message("Failed to unlink client from agent"):
            result = data_service.rpc(
                db, "unlink_client_from_agent", {"p_client_id": coerce_uuid(client_id)}, commit=True
            )
        logger.info("Client %s unlinked", client_id)
        return result

    @staticmethod
    def performance(db: Session, agent_id: str | None = None) -> builtins.list[dict[str, Any]]:
        params = {"p_agent_id": coerce_uuid(agent_id) if agent_id else None}
        with data_service.fallback_message("Failed to get agent performance"):
            return data_service.rpc_rows(db, "get_agent_performance", params)

    @staticmethod
    def clients(db: Session, agent_id: str) -> builtins.list[Client]:
        agent = get_or_404(db, Agent, agent_id)
        return (
            db.query(Client)
            .filter(Client.agent_id == agent.id)
            .order_by(Client.overall_margin.desc())
            .all()
        )


agents = Agents()
