"""Tests for the clients service."""

import uuid
from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from app.errors import UnauthorizedError
from app.models.performance import DailyPerformance, MonthlyPerformance
from app.models.team_settings import TeamSettings
from app.schemas.client import ClientCreate, ClientUpdate
from app.services.clients import calculate_client_nots, clients


class TestCalculateClientNots:
    def test_floor_of_margin_over_threshold(self):
        assert calculate_client_nots(12500, 6000) == 2

    def test_exact_multiple(self):
        assert calculate_client_nots(Decimal("18000"), Decimal("6000")) == 3

    def test_zero_threshold(self):
        assert calculate_client_nots(50000, 0) == 0

    def test_missing_threshold(self):
        assert calculate_client_nots(50000, None) == 0

    def test_missing_margin(self):
        assert calculate_client_nots(None, 6000) == 0


def test_create_client_requires_admin(db_session):
    with pytest.raises(UnauthorizedError):
        clients.create(db_session, ClientCreate(name="Blocked"), is_admin=False)


def test_create_client_computes_nots(db_session):
    created = clients.create(
        db_session,
        ClientCreate(name="Rehan Traders", margin_in=13000, overall_margin=20000),
        is_admin=True,
    )
    assert created.is_new_client is True
    assert created.nots_generated == 2


def test_create_client_uses_team_threshold(db_session):
    db_session.add(TeamSettings(commission_threshold_pkr=5000, nots_target_per_client=40))
    db_session.commit()
    created = clients.create(db_session, ClientCreate(name="Threshold Client", margin_in=15000), is_admin=True)
    assert created.nots_generated == 3


def test_duplicate_client_name_conflicts(db_session, client):
    with pytest.raises(HTTPException) as exc_info:
        clients.create(db_session, ClientCreate(name=client.name), is_admin=True)
    assert exc_info.value.status_code == 409


def test_get_client_not_found(db_session):
    with pytest.raises(HTTPException) as exc_info:
        clients.get(db_session, str(uuid.uuid4()))
    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Client not found"


def test_get_client_invalid_id(db_session):
    with pytest.raises(HTTPException) as exc_info:
        clients.get(db_session, "not-a-uuid")
    assert exc_info.value.status_code == 400


def test_list_clients_filters_by_agent(db_session, client, agent):
    clients.create(db_session, ClientCreate(name="Unassigned Client"), is_admin=True)
    items = clients.list(db_session, agent_id=str(agent.id))
    assert [item.id for item in items] == [client.id]
    assert items[0].agent.email == agent.email


def test_list_clients_search(db_session, client):
    clients.create(db_session, ClientCreate(name="Zubair Holdings"), is_admin=True)
    items = clients.list(db_session, search="zubair")
    assert [item.name for item in items] == ["Zubair Holdings"]


def test_list_clients_rejects_unknown_order(db_session):
    with pytest.raises(HTTPException) as exc_info:
        clients.list(db_session, order_by="password")
    assert exc_info.value.status_code == 400


def test_update_client_recomputes_nots(db_session, client):
    updated = clients.update(db_session, str(client.id), ClientUpdate(margin_in=30000), is_admin=True)
    assert updated.nots_generated == 5
    assert updated.overall_margin == 50000


def test_update_client_requires_admin(db_session, client):
    with pytest.raises(UnauthorizedError):
        clients.update(db_session, str(client.id), ClientUpdate(name="Nope"), is_admin=False)


def test_delete_client(db_session, client):
    clients.delete(db_session, str(client.id), is_admin=True)
    with pytest.raises(HTTPException):
        clients.get(db_session, str(client.id))


def test_delete_client_requires_admin(db_session, client):
    with pytest.raises(UnauthorizedError):
        clients.delete(db_session, str(client.id), is_admin=False)
    assert clients.get(db_session, str(client.id)).id == client.id


class TestAddDailyMargin:
    def test_requires_admin(self, db_session, client):
        with pytest.raises(UnauthorizedError):
            clients.add_daily_margin(db_session, str(client.id), 1000, 1000, is_admin=False)
        assert db_session.query(DailyPerformance).count() == 0

    def test_adds_to_client_totals(self, db_session, client):
        updated = clients.add_daily_margin(
            db_session, str(client.id), 6000, 2500, date(2025, 9, 3), is_admin=True
        )
        assert updated.margin_in == 18000
        assert updated.overall_margin == 52500
        assert updated.nots_generated == 3

        entry = db_session.query(DailyPerformance).filter_by(client_id=client.id).one()
        assert entry.entry_date == date(2025, 9, 3)
        assert entry.margin_in == 6000

    def test_upserts_monthly_row(self, db_session, client):
        clients.add_daily_margin(db_session, str(client.id), 4000, 1000, date(2025, 9, 3), is_admin=True)
        clients.add_daily_margin(db_session, str(client.id), 3000, 500, date(2025, 9, 4), is_admin=True)

        monthly = db_session.query(MonthlyPerformance).filter_by(client_id=client.id).one()
        assert (monthly.month, monthly.year) == (9, 2025)
        assert monthly.margin_in == 7000
        assert monthly.overall_margin == 1500
        assert monthly.nots_achieved == 1

    def test_separate_months_get_separate_rows(self, db_session, client):
        clients.add_daily_margin(db_session, str(client.id), 4000, 0, date(2025, 9, 30), is_admin=True)
        clients.add_daily_margin(db_session, str(client.id), 4000, 0, date(2025, 10, 1), is_admin=True)
        periods = {
            (row.month, row.year) for row in db_session.query(MonthlyPerformance).filter_by(client_id=client.id)
        }
        assert periods == {(9, 2025), (10, 2025)}

    def test_defaults_to_today(self, db_session, client):
        clients.add_daily_margin(db_session, str(client.id), 100, 100, is_admin=True)
        entry = db_session.query(DailyPerformance).filter_by(client_id=client.id).one()
        assert entry.entry_date is not None


def test_list_response_reports_requested_page(db_session, client):
    response = clients.list_response(db_session, None, None, "created_at", "desc", 10, 0)
    assert response["limit"] == 10
    assert response["offset"] == 0
    assert response["count"] == 1

    paged = clients.list_response(db_session, None, None, "created_at", "desc", 10, 5)
    assert (paged["limit"], paged["offset"], paged["count"]) == (10, 5, 0)


def test_list_response_accepts_keywords(db_session, client):
    response = clients.list_response(db_session, agent_id=str(client.agent_id), limit=3, offset=0)
    assert response["limit"] == 3
    assert [item.id for item in response["items"]] == [client.id]
