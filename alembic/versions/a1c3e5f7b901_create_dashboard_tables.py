"""Create brokerage dashboard tables.

Revision ID: a1c3e5f7b901
Revises:
Create Date: 2026-10-19
"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "a1c3e5f7b901"
down_revision = None
branch_labels = None
depends_on = None

UUID = postgresql.UUID(as_uuid=True)


def _timestamps(with_updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now())]
    if with_updated:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()))
    return columns


def _score(name: str) -> sa.CheckConstraint:
    return sa.CheckConstraint(f"{name} >= 1 AND {name} <= 5", name=f"ck_agent_evaluations_{name}")


def upgrade() -> None:
    op.create_table(
        "agents",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.String(length=160), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("phone", sa.String(length=40), nullable=True),
        sa.Column("commission_rate", sa.Numeric(6, 4), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=True, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "clients",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.String(length=200), nullable=False, unique=True),
        sa.Column("margin_in", sa.Numeric(16, 2), nullable=False, server_default="0"),
        sa.Column("overall_margin", sa.Numeric(16, 2), nullable=False, server_default="0"),
        sa.Column("invested_amount", sa.Numeric(16, 2), nullable=False, server_default="0"),
        sa.Column("monthly_revenue", sa.Numeric(16, 2), nullable=False, server_default="0"),
        sa.Column("nots_generated", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("agent_id", UUID, sa.ForeignKey("agents.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_new_client", sa.Boolean(), nullable=True, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_clients_agent_id", "clients", ["agent_id"])

    op.create_table(
        "products",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.String(length=160), nullable=False, unique=True),
        sa.Column("commission_usd", sa.Numeric(12, 4), nullable=False),
        sa.Column("tick_size", sa.Numeric(12, 6), nullable=False),
        sa.Column("tick_value", sa.Numeric(12, 4), nullable=False),
        sa.Column("price_quote", sa.Numeric(14, 4), nullable=False),
        *_timestamps(with_updated=False),
    )

    op.create_table(
        "team_settings",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("commission_threshold_pkr", sa.Numeric(14, 2), nullable=False, server_default="6000"),
        sa.Column("nots_target_per_client", sa.Integer(), nullable=False, server_default="50"),
        *_timestamps(),
    )

    op.create_table(
        "monthly_performance",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("client_id", UUID, sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("margin_in", sa.Numeric(16, 2), nullable=False, server_default="0"),
        sa.Column("overall_margin", sa.Numeric(16, 2), nullable=False, server_default="0"),
        sa.Column("revenue_generated", sa.Numeric(16, 2), nullable=False, server_default="0"),
        sa.Column("nots_achieved", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint("client_id", "month", "year", name="uq_monthly_performance_client_period"),
        sa.CheckConstraint("month >= 1 AND month <= 12", name="ck_monthly_performance_month"),
    )
    op.create_index("ix_monthly_performance_period", "monthly_performance", ["year", "month"])

    op.create_table(
        "daily_performance",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("client_id", UUID, sa.ForeignKey("clients.id", ondelete="CASCADE"), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False, server_default=sa.text("CURRENT_DATE")),
        sa.Column("margin_in", sa.Numeric(16, 2), nullable=False, server_default="0"),
        sa.Column("overall_margin", sa.Numeric(16, 2), nullable=False, server_default="0"),
        *_timestamps(with_updated=False),
    )
    op.create_index("ix_daily_performance_client_date", "daily_performance", ["client_id", "entry_date"])

    op.create_table(
        "monthly_base_equity",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("total_base_equity", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("set_by_admin", sa.String(length=255), nullable=True),
        *_timestamps(with_updated=False),
        sa.UniqueConstraint("month", "year", name="uq_monthly_base_equity_period"),
        sa.CheckConstraint("month >= 1 AND month <= 12", name="ck_monthly_base_equity_month"),
    )

    op.create_table(
        "monthly_resets",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("reset_month", sa.Integer(), nullable=False),
        sa.Column("reset_year", sa.Integer(), nullable=False),
        sa.Column("previous_month", sa.Integer(), nullable=False),
        sa.Column("previous_year", sa.Integer(), nullable=False),
        sa.Column("clients_reset", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("total_revenue_reset", sa.Numeric(18, 2), nullable=True, server_default="0"),
        sa.Column("total_nots_reset", sa.Numeric(18, 2), nullable=True, server_default="0"),
        sa.Column("reset_by_admin", sa.String(length=255), nullable=True),
        *_timestamps(with_updated=False),
    )

    op.create_table(
        "agent_evaluations",
        sa.Column("id", UUID, primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("agent_id", UUID, sa.ForeignKey("agents.id", ondelete="CASCADE"), nullable=False),
        sa.Column("week_start_date", sa.Date(), nullable=False),
        sa.Column("compliance_score", sa.Integer(), nullable=False),
        sa.Column("tone_clarity_score", sa.Integer(), nullable=False),
        sa.Column("relevance_score", sa.Integer(), nullable=False),
        sa.Column("client_satisfaction_score", sa.Integer(), nullable=False),
        sa.Column("portfolio_revenue_score", sa.Integer(), nullable=False),
        sa.Column("total_score", sa.Integer(), nullable=False),
        sa.Column("compliance_remarks", sa.Text(), nullable=True),
        sa.Column("tone_remarks", sa.Text(), nullable=True),
        sa.Column("relevance_remarks", sa.Text(), nullable=True),
        sa.Column("satisfaction_remarks", sa.Text(), nullable=True),
        sa.Column("portfolio_remarks", sa.Text(), nullable=True),
        sa.Column("overall_remarks", sa.Text(), nullable=True),
        sa.Column("evaluated_by", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("agent_id", "week_start_date", name="uq_agent_evaluations_agent_week"),
        _score("compliance_score"),
        _score("tone_clarity_score"),
        _score("relevance_score"),
        _score("client_satisfaction_score"),
        _score("portfolio_revenue_score"),
    )
    op.create_index("ix_agent_evaluations_week", "agent_evaluations", ["week_start_date"])
    op.create_index("ix_agent_evaluations_score", "agent_evaluations", ["total_score"])


def downgrade() -> None:
    op.drop_index("ix_agent_evaluations_score", table_name="agent_evaluations")
    op.drop_index("ix_agent_evaluations_week", table_name="agent_evaluations")
    op.drop_table("agent_evaluations")
    op.drop_table("monthly_resets")
    op.drop_table("monthly_base_equity")
    op.drop_index("ix_daily_performance_client_date", table_name="daily_performance")
    op.drop_table("daily_performance")
    op.drop_index("ix_monthly_performance_period", table_name="monthly_performance")
    op.drop_table("monthly_performance")
    op.drop_table("team_settings")
    op.drop_table("products")
    op.drop_index("ix_clients_agent_id", table_name="clients")
    op.drop_table("clients")
    op.drop_table("agents")
