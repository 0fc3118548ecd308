"""Tests for the agents service."""

import uuid
from unittest.mock import patch

import pytest
from fastapi import HTTPException

from app.errors import DataServiceError, UnauthorizedError
from app.models.client import Client
from app.schemas.agent import AgentCreate, AgentUpdate
from app.services import agents as agents_module
from app.services.agents import agents


def test_create_agent_normalizes_email(db_session):
    agent = agents.create(
        db_session,
        AgentCreate(name="Bilal", email="Bilal.Ahmed@Example.com", commission_rate=0.04),
        is_admin=True,
    )
    assert agent.email == "bilal.ahmed@example.com"
    assert agent.is_active is True


def test_create_agent_requires_admin(db_session):
    with pytest.raises(UnauthorizedError):
        agents.create(db_session, AgentCreate(name="Nope", email="nope@example.com"), is_admin=False)


def test_duplicate_email_conflicts(db_session, agent):
    with pytest.raises(HTTPException) as exc_info:
        agents.create(db_session, AgentCreate(name="Copy", email=agent.email), is_admin=True)
    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "An agent with this email already exists"


def test_list_agents_ordered_by_name(db_session):
    agents.create(db_session, AgentCreate(name="Zara", email="zara@example.com"), is_admin=True)
    agents.create(db_session, AgentCreate(name="Adeel", email="adeel@example.com"), is_admin=True)
    names = [item.name for item in agents.list(db_session)]
    assert names == sorted(names)


def test_list_agents_active_filter(db_session, agent):
    agents.create(
        db_session, AgentCreate(name="Retired", email="retired@example.com", is_active=False), is_admin=True
    )
    active = agents.list(db_session, is_active=True)
    assert all(item.is_active for item in active)
    assert agent.id in {item.id for item in active}


def test_update_agent(db_session, agent):
    updated = agents.update(db_session, str(agent.id), AgentUpdate(commission_rate=0.07), is_admin=True)
    assert float(updated.commission_rate) == pytest.approx(0.07)


def test_get_agent_not_found(db_session):
    with pytest.raises(HTTPException) as exc_info:
        agents.get(db_session, str(uuid.uuid4()))
    assert exc_info.value.status_code == 404


def test_delete_agent_requires_admin(db_session, agent):
    with pytest.raises(UnauthorizedError):
        agents.delete(db_session, str(agent.id), is_admin=False)


def test_delete_agent(db_session, agent):
    agents.delete(db_session, str(agent.id), is_admin=True)
    with pytest.raises(HTTPException):
        agents.get(db_session, str(agent.id))


def test_agent_clients_ordered_by_overall_margin(db_session, agent):
    db_session.add_all(
        [
            Client(name="Small", overall_margin=100, agent_id=agent.id),
            Client(name="Large", overall_margin=900, agent_id=agent.id),
            Client(name="Other", overall_margin=5000),
        ]
    )
    db_session.commit()
    assert [item.name for item in agents.clients(db_session, str(agent.id))] == ["Large", "Small"]


class TestProcedureBackedOperations:
    def test_summary_reads_view_by_revenue(self, db_session):
        rows = [{"id": "a", "total_client_revenue": 10}]
        with patch.object(agents_module.data_service, "select_rows", return_value=rows) as select_rows:
            assert agents.summary(db_session) == rows
        select_rows.assert_called_once_with(
            db_session, "agent_performance_summary", order_by="total_client_revenue", descending=True
        )

    def test_link_client_requires_admin(self, db_session):
        with patch.object(agents_module.data_service, "rpc") as rpc:
            with pytest.raises(UnauthorizedError):
                agents.link_client(db_session, str(uuid.uuid4()), str(uuid.uuid4()), is_admin=False)
        rpc.assert_not_called()

    def test_link_client_calls_procedure(self, db_session):
        client_id, agent_id = uuid.uuid4(), uuid.uuid4()
        with patch.object(agents_module.data_service, "rpc", return_value={"id": str(client_id)}) as rpc:
            agents.link_client(db_session, str(client_id), str(agent_id), is_admin=True)
        rpc.assert_called_once_with(
            db_session,
            "link_client_to_agent",
            {"p_client_id": client_id, "p_agent_id": agent_id},
            commit=True,
        )

    def test_link_client_fallback_message(self, db_session):
        with patch.object(agents_module.data_service, "rpc", side_effect=DataServiceError()):
            with pytest.raises(DataServiceError, match="Failed to link client to agent"):
                agents.link_client(db_session, str(uuid.uuid4()), str(uuid.uuid4()), is_admin=True)

    def test_unlink_client_keeps_remote_message(self, db_session):
        with patch.object(agents_module.data_service, "rpc", side_effect=DataServiceError("Client not found")):
            with pytest.raises(DataServiceError, match="Client not found"):
                agents.unlink_client(db_session, str(uuid.uuid4()), is_admin=True)

    def test_performance_for_all_agents(self, db_session):
        with patch.object(agents_module.data_service, "rpc_rows", return_value=[]) as rpc_rows:
            assert agents.performance(db_session) == []
        rpc_rows.assert_called_once_with(db_session, "get_agent_performance", {"p_agent_id": None})

    def test_performance_fallback_message(self, db_session):
        with patch.object(agents_module.data_service, "rpc_rows", side_effect=DataServiceError()):
            with pytest.raises(DataServiceError, match="Failed to get agent performance"):
                agents.performance(db_session, str(uuid.uuid4()))
