from __future__ import annotations

import logging
import math
from datetime import UTC, date, datetime
from decimal import Decimal

from sqlalchemy.orm import Session, joinedload

from app.models.client import Client
from app.models.performance import DailyPerformance, MonthlyPerformance
from app.schemas.client import ClientCreate, ClientUpdate
from app.services.common import (
    apply_ordering,
    apply_pagination,
    coerce_uuid,
    commit_or_raise,
    get_or_404,
    require_admin,
)
from app.services.response import ListResponseMixin
from app.services.team_settings import team_settings

logger = logging.getLogger(__name__)

ADD_CLIENT_FAILED = "Failed to add client"
UPDATE_CLIENT_FAILED = "Failed to update client"
ADD_DAILY_MARGIN_FAILED = "Failed to add daily margin"
DELETE_CLIENT_FAILED = "Failed to delete client"


def calculate_client_nots(margin: float | Decimal | None, threshold: float | Decimal | None) -> int:
    """Whole NOTs earned by ``margin`` at ``threshold`` PKR per NOT."""
    if not threshold or threshold <= 0:
        return 0
    return max(math.floor(float(margin or 0) / float(threshold)), 0)


def _add(current: float | Decimal | None, amount: float) -> Decimal:
    return Decimal(str(current or 0)) + Decimal(str(amount))


class Clients(ListResponseMixin):
    @staticmethod
    def list(
        db: Session,
        agent_id: str | None = None,
        search: str | None = None,
        order_by: str = "created_at",
        order_dir: str = "desc",
        limit: int = 50,
        offset: int = 0,
    ) -> list[Client]:
        query = db.query(Client).options(joinedload(Client.agent))
        if agent_id:
            query = query.filter(Client.agent_id == coerce_uuid(agent_id))
        if search:
            query = query.filter(Client.name.ilike(f"%{search.strip()}%"))
        query = apply_ordering(
            query,
            order_by,
            order_dir,
            {
                "created_at": Client.created_at,
                "name": Client.name,
                "margin_in": Client.margin_in,
                "overall_margin": Client.overall_margin,
                "monthly_revenue": Client.monthly_revenue,
                "nots_generated": Client.nots_generated,
            },
        )
        return apply_pagination(query, limit, offset).all()

    @staticmethod
    def get(db: Session, client_id: str) -> Client:
        return get_or_404(db, Client, client_id)

    @staticmethod
    def create(db: Session, payload: ClientCreate, is_admin: bool) -> Client:
        require_admin(is_admin)
        data = payload.model_dump()
        client = Client(**data, is_new_client=True)
        client.nots_generated = calculate_client_nots(client.margin_in, team_settings.commission_threshold(db))
        db.add(client)
        commit_or_raise(db, ADD_CLIENT_FAILED, conflict_detail="A client with this name already exists")
        db.refresh(client)
        logger.info("Client %s created", client.id)
        return client

    @staticmethod
    def update(db: Session, client_id: str, payload: ClientUpdate, is_admin: bool) -> Client:
        require_admin(is_admin)
        client = get_or_404(db, Client, client_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(client, field, value)
        client.nots_generated = calculate_client_nots(client.margin_in, team_settings.commission_threshold(db))
        commit_or_raise(db, UPDATE_CLIENT_FAILED, conflict_detail="A client with this name already exists")
        db.refresh(client)
        return client

    @staticmethod
    def delete(db: Session, client_id: str, is_admin: bool) -> None:
        require_admin(is_admin)
        client = get_or_404(db, Client, client_id)
        db.delete(client)
        commit_or_raise(db, DELETE_CLIENT_FAILED)
        logger.info("Client %s deleted", client_id)

    @staticmethod
    def add_daily_margin(
        db: Session,
        client_id: str,
        margin_in: float,
        overall_margin: float,
        entry_date: date | None = None,
        *,
        is_admin: bool,
    ) -> Client:
        """Record a day's margin and roll it into the client and its monthly row."""
        require_admin(is_admin)
        client = get_or_404(db, Client, client_id)
        entry_date = entry_date or datetime.now(UTC).date()
        threshold = team_settings.commission_threshold(db)

        db.add(
            DailyPerformance(
                client_id=client.id,
                entry_date=entry_date,
                margin_in=margin_in,
                overall_margin=overall_margin,
            )
        )
        client.margin_in = _add(client.margin_in, margin_in)
        client.overall_margin = _add(client.overall_margin, overall_margin)
        client.nots_generated = calculate_client_nots(client.margin_in, threshold)

        monthly = (
            db.query(MonthlyPerformance)
            .filter(MonthlyPerformance.client_id == client.id)
            .filter(MonthlyPerformance.month == entry_date.month)
            .filter(MonthlyPerformance.year == entry_date.year)
            .first()
        )
        if monthly is None:
            monthly = MonthlyPerformance(
                client_id=client.id,
                month=entry_date.month,
                year=entry_date.year,
                margin_in=0,
                overall_margin=0,
            )
            db.add(monthly)
        monthly.margin_in = _add(monthly.margin_in, margin_in)
        monthly.overall_margin = _add(monthly.overall_margin, overall_margin)
        monthly.nots_achieved = calculate_client_nots(monthly.margin_in, threshold)

        commit_or_raise(db, ADD_DAILY_MARGIN_FAILED)
        db.refresh(client)
        logger.info("Daily margin %s recorded for client %s on %s", margin_in, client.id, entry_date)
        return client


clients = Clients()
