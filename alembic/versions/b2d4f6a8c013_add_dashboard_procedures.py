"""Add stored procedures and views read by the dashboard.

Monthly targets are 18% of equity expressed in NOTs at the team commission
threshold. ``get_working_days_in_month`` counts Monday to Friday.

Revision ID: b2d4f6a8c013
Revises: a1c3e5f7b901
Create Date: 2026-10-19
"""

from alembic import op

# revision identifiers, used by Alembic.
revision = "b2d4f6a8c013"
down_revision = "a1c3e5f7b901"
branch_labels = None
depends_on = None

TARGET_RATE = "0.18"

FUNCTIONS = [
    """
    CREATE OR REPLACE FUNCTION team_commission_threshold()
    RETURNS numeric
    LANGUAGE sql STABLE
    AS $$
      SELECT COALESCE(
        (SELECT NULLIF(commission_threshold_pkr, 0) FROM team_settings ORDER BY created_at LIMIT 1),
        6000
      );
    $$;
    """,
    """
    CREATE OR REPLACE FUNCTION get_working_days_in_month(target_year integer, target_month integer)
    RETURNS integer
    LANGUAGE sql IMMUTABLE
    AS $$
      SELECT COUNT(*)::integer
      FROM generate_series(
        make_date(target_year, target_month, 1),
        (make_date(target_year, target_month, 1) + interval '1 month - 1 day')::date,
        interval '1 day'
      ) AS day
      WHERE EXTRACT(ISODOW FROM day) < 6;
    $$;
    """,
    """
    CREATE OR REPLACE FUNCTION set_monthly_base_equity(p_month integer, p_year integer, p_base_equity numeric)
    RETURNS json
    LANGUAGE plpgsql
    AS $$
    DECLARE
      actor text := NULLIF(current_setting('app.actor', true), '');
    BEGIN
      INSERT INTO monthly_base_equity (month, year, total_base_equity, set_by_admin)
      VALUES (p_month, p_year, p_base_equity, actor)
      ON CONFLICT (month, year) DO UPDATE SET
        total_base_equity = EXCLUDED.total_base_equity,
        set_by_admin = EXCLUDED.set_by_admin,
        created_at = now();

      RETURN json_build_object('month', p_month, 'year', p_year, 'base_equity', p_base_equity, 'set_by', actor);
    END;
    $$;
    """,
    """
    CREATE OR REPLACE FUNCTION reset_monthly_performance(p_new_month integer, p_new_year integer)
    RETURNS json
    LANGUAGE plpgsql
    AS $$
    DECLARE
      actor text := NULLIF(current_setting('app.actor', true), '');
      prev_month integer := CASE WHEN p_new_month = 1 THEN 12 ELSE p_new_month - 1 END;
      prev_year integer := CASE WHEN p_new_month = 1 THEN p_new_year - 1 ELSE p_new_year END;
      clients_count integer;
      revenue_reset numeric;
      nots_reset numeric;
      equity numeric;
    BEGIN
      SELECT COUNT(*), COALESCE(SUM(monthly_revenue), 0), COALESCE(SUM(nots_generated), 0)
      INTO clients_count, revenue_reset, nots_reset
      FROM clients;

      UPDATE clients SET monthly_revenue = 0, nots_generated = 0, is_new_client = false, updated_at = now();

      SELECT COALESCE(SUM(overall_margin), 0) INTO equity FROM clients;

      INSERT INTO monthly_base_equity (month, year, total_base_equity, set_by_admin)
      VALUES (p_new_month, p_new_year, equity, actor)
      ON CONFLICT (month, year) DO UPDATE SET
        total_base_equity = EXCLUDED.total_base_equity,
        set_by_admin = EXCLUDED.set_by_admin,
        created_at = now();

      INSERT INTO monthly_resets (
        reset_month, reset_year, previous_month, previous_year,
        clients_reset, total_revenue_reset, total_nots_reset, reset_by_admin
      ) VALUES (
        p_new_month, p_new_year, prev_month, prev_year,
        clients_count, revenue_reset, nots_reset, actor
      );

      RETURN json_build_object(
        'reset_month', p_new_month,
        'reset_year', p_new_year,
        'clients_reset', clients_count,
        'revenue_reset', revenue_reset,
        'nots_reset', nots_reset,
        'base_equity_set', equity
      );
    END;
    $$;
    """,
    f"""
    CREATE OR REPLACE FUNCTION get_monthly_dashboard_stats(p_month integer DEFAULT NULL, p_year integer DEFAULT NULL)
    RETURNS TABLE (
      month_year text,
      total_clients bigint,
      base_equity numeric,
      current_equity numeric,
      monthly_target_nots numeric,
      daily_target_nots numeric,
      weekly_target_nots numeric,
      achieved_nots numeric,
      progress_percentage numeric,
      total_revenue numeric,
      working_days integer
    )
    LANGUAGE plpgsql
    AS $$
    DECLARE
      target_month integer := COALESCE(p_month, EXTRACT(MONTH FROM CURRENT_DATE)::integer);
      target_year integer := COALESCE(p_year, EXTRACT(YEAR FROM CURRENT_DATE)::integer);
      base numeric;
      days integer;
      target numeric;
    BEGIN
      SELECT mbe.total_base_equity INTO base
      FROM monthly_base_equity mbe
      WHERE mbe.month = target_month AND mbe.year = target_year;

      IF base IS NULL THEN
        SELECT COALESCE(SUM(c.overall_margin), 0) INTO base FROM clients c;
      END IF;

      days := get_working_days_in_month(target_year, target_month);
      target := (base * {TARGET_RATE}) / team_commission_threshold();

      RETURN QUERY
      SELECT
        target_month || '/' || target_year,
        COUNT(c.id),
        base,
        COALESCE(SUM(c.overall_margin), 0),
        target,
        CASE WHEN days > 0 THEN target / days ELSE 0 END,
        CASE WHEN days > 0 THEN (target / days) * 5 ELSE 0 END,
        COALESCE(SUM(c.nots_generated), 0)::numeric,
        CASE WHEN target > 0 THEN (COALESCE(SUM(c.nots_generated), 0) / target) * 100 ELSE 0 END,
        COALESCE(SUM(c.monthly_revenue), 0),
        days
      FROM clients c;
    END;
    $$;
    """,
    f"""
    CREATE OR REPLACE FUNCTION calculate_equity_based_target()
    RETURNS TABLE (
      total_equity numeric,
      monthly_target_nots numeric,
      daily_target_nots numeric,
      weekly_target_nots numeric
    )
    LANGUAGE plpgsql
    AS $$
    DECLARE
      equity numeric;
      days integer := get_working_days_in_month(
        EXTRACT(YEAR FROM CURRENT_DATE)::integer, EXTRACT(MONTH FROM CURRENT_DATE)::integer
      );
      target numeric;
    BEGIN
      SELECT COALESCE(SUM(overall_margin), 0) INTO equity FROM clients;
      target := (equity * {TARGET_RATE}) / team_commission_threshold();

      RETURN QUERY
      SELECT
        equity,
        target,
        CASE WHEN days > 0 THEN target / days ELSE 0 END,
        CASE WHEN days > 0 THEN (target / days) * 5 ELSE 0 END;
    END;
    $$;
    """,
    """
    CREATE OR REPLACE FUNCTION get_retention_metrics(days_back integer DEFAULT 30)
    RETURNS TABLE (
      total_clients bigint,
      active_clients bigint,
      retention_rate numeric,
      avg_trades_per_client numeric,
      total_commission numeric,
      avg_commission_per_client numeric
    )
    LANGUAGE sql STABLE
    AS $$
      WITH recent AS (
        SELECT dp.client_id, COUNT(*) AS entries, SUM(dp.margin_in) AS margin
        FROM daily_performance dp
        WHERE dp.entry_date >= CURRENT_DATE - days_back
        GROUP BY dp.client_id
      ), totals AS (
        SELECT COUNT(*) AS client_count FROM clients
      )
      SELECT
        totals.client_count,
        COUNT(recent.client_id),
        CASE WHEN totals.client_count > 0
          THEN (COUNT(recent.client_id)::numeric / totals.client_count) * 100 ELSE 0 END,
        COALESCE(AVG(recent.entries), 0),
        COALESCE(SUM(recent.margin), 0),
        CASE WHEN COUNT(recent.client_id) > 0
          THEN COALESCE(SUM(recent.margin), 0) / COUNT(recent.client_id) ELSE 0 END
      FROM totals LEFT JOIN recent ON true
      GROUP BY totals.client_count;
    $$;
    """,
    """
    CREATE OR REPLACE FUNCTION get_monthly_team_stats(target_month integer, target_year integer)
    RETURNS TABLE (
      total_clients bigint,
      total_margin_in numeric,
      total_overall_margin numeric,
      total_revenue numeric,
      total_nots bigint,
      target_nots integer,
      progress_percentage numeric
    )
    LANGUAGE plpgsql
    AS $$
    DECLARE
      per_client integer := COALESCE(
        (SELECT ts.nots_target_per_client FROM team_settings ts ORDER BY ts.created_at LIMIT 1), 50
      );
    BEGIN
      RETURN QUERY
      SELECT
        COUNT(DISTINCT mp.client_id),
        COALESCE(SUM(mp.margin_in), 0),
        COALESCE(SUM(mp.overall_margin), 0),
        COALESCE(SUM(mp.revenue_generated), 0),
        COALESCE(SUM(mp.nots_achieved), 0)::bigint,
        (per_client * COUNT(DISTINCT mp.client_id))::integer,
        CASE WHEN COUNT(DISTINCT mp.client_id) > 0 AND per_client > 0
          THEN (COALESCE(SUM(mp.nots_achieved), 0)::numeric / (per_client * COUNT(DISTINCT mp.client_id))) * 100
          ELSE 0 END
      FROM monthly_performance mp
      WHERE mp.month = target_month AND mp.year = target_year;
    END;
    $$;
    """,
    """
    CREATE OR REPLACE FUNCTION get_agent_performance(p_agent_id uuid DEFAULT NULL)
    RETURNS TABLE (
      agent_id uuid,
      agent_name text,
      agent_email text,
      total_clients bigint,
      active_clients bigint,
      total_margin numeric,
      total_revenue numeric,
      total_nots numeric,
      agent_commission numeric,
      avg_margin_per_client numeric,
      avg_revenue_per_client numeric
    )
    LANGUAGE sql STABLE
    AS $$
      SELECT
        a.id,
        a.name::text,
        a.email::text,
        COUNT(c.id),
        COUNT(c.id) FILTER (WHERE c.overall_margin > 0),
        COALESCE(SUM(c.overall_margin), 0),
        COALESCE(SUM(c.monthly_revenue), 0),
        COALESCE(SUM(c.nots_generated), 0)::numeric,
        COALESCE(SUM(c.monthly_revenue), 0) * a.commission_rate,
        CASE WHEN COUNT(c.id) > 0 THEN COALESCE(SUM(c.overall_margin), 0) / COUNT(c.id) ELSE 0 END,
        CASE WHEN COUNT(c.id) > 0 THEN COALESCE(SUM(c.monthly_revenue), 0) / COUNT(c.id) ELSE 0 END
      FROM agents a
      LEFT JOIN clients c ON c.agent_id = a.id
      WHERE (p_agent_id IS NULL OR a.id = p_agent_id) AND a.is_active = true
      GROUP BY a.id, a.name, a.email, a.commission_rate
      ORDER BY 7 DESC;
    $$;
    """,
    """
    CREATE OR REPLACE FUNCTION link_client_to_agent(p_client_id uuid, p_agent_id uuid)
    RETURNS json
    LANGUAGE plpgsql
    AS $$
    DECLARE
      updated clients%ROWTYPE;
    BEGIN
      IF NOT EXISTS (SELECT 1 FROM agents WHERE id = p_agent_id AND is_active = true) THEN
        RAISE EXCEPTION 'Agent not found or inactive';
      END IF;

      UPDATE clients SET agent_id = p_agent_id, updated_at = now()
      WHERE id = p_client_id
      RETURNING * INTO updated;

      IF NOT FOUND THEN
        RAISE EXCEPTION 'Client not found';
      END IF;

      RETURN row_to_json(updated);
    END;
    $$;
    """,
    """
    CREATE OR REPLACE FUNCTION unlink_client_from_agent(p_client_id uuid)
    RETURNS json
    LANGUAGE plpgsql
    AS $$
    DECLARE
      updated clients%ROWTYPE;
    BEGIN
      UPDATE clients SET agent_id = NULL, updated_at = now()
      WHERE id = p_client_id
      RETURNING * INTO updated;

      IF NOT FOUND THEN
        RAISE EXCEPTION 'Client not found';
      END IF;

      RETURN row_to_json(updated);
    END;
    $$;
    """,
]

TODAY_COLUMNS = """
  COALESCE((SELECT SUM(dp.margin_in) FROM daily_performance dp WHERE dp.entry_date = CURRENT_DATE), 0)
    / team_commission_threshold() AS today_nots,
  COALESCE((SELECT SUM(dp.margin_in) FROM daily_performance dp WHERE dp.entry_date = CURRENT_DATE), 0)
    AS today_margin_added,
  0::numeric AS today_withdrawals
"""

VIEWS = [
    """
    CREATE OR REPLACE VIEW agent_performance_summary AS
    SELECT
      a.id,
      a.name,
      a.email,
      a.phone,
      a.commission_rate,
      a.is_active,
      a.created_at,
      a.updated_at,
      COUNT(c.id) AS client_count,
      COUNT(c.id) FILTER (WHERE c.overall_margin > 0) AS active_client_count,
      COALESCE(SUM(c.overall_margin), 0) AS total_client_margin,
      COALESCE(SUM(c.monthly_revenue), 0) AS total_client_revenue,
      COALESCE(SUM(c.nots_generated), 0) AS total_client_nots,
      COALESCE(SUM(c.monthly_revenue), 0) * a.commission_rate AS estimated_commission
    FROM agents a
    LEFT JOIN clients c ON c.agent_id = a.id
    GROUP BY a.id, a.name, a.email, a.phone, a.commission_rate, a.is_active, a.created_at, a.updated_at;
    """,
    f"""
    CREATE OR REPLACE VIEW enhanced_dashboard_stats AS
    SELECT
      COUNT(c.id) AS total_clients,
      COALESCE(SUM(c.overall_margin), 0) AS total_equity,
      COALESCE(SUM(c.monthly_revenue), 0) AS total_monthly_revenue,
      COALESCE(SUM(c.nots_generated), 0) AS total_nots,
      (COALESCE(SUM(c.overall_margin), 0) * {TARGET_RATE}) / team_commission_threshold() AS monthly_target_nots,
      CASE WHEN COALESCE(SUM(c.overall_margin), 0) > 0
        THEN (COALESCE(SUM(c.nots_generated), 0)
              / ((SUM(c.overall_margin) * {TARGET_RATE}) / team_commission_threshold())) * 100
        ELSE 0 END AS progress_percentage,
      {TODAY_COLUMNS}
    FROM clients c;
    """,
    f"""
    CREATE OR REPLACE VIEW current_month_dashboard AS
    WITH base AS (
      SELECT COALESCE(
        (SELECT total_base_equity FROM monthly_base_equity
         WHERE month = EXTRACT(MONTH FROM CURRENT_DATE) AND year = EXTRACT(YEAR FROM CURRENT_DATE)),
        (SELECT COALESCE(SUM(overall_margin), 0) FROM clients)
      ) AS equity
    )
    SELECT
      COUNT(c.id) AS total_clients,
      COALESCE(SUM(c.overall_margin), 0) AS current_equity,
      COALESCE(SUM(c.monthly_revenue), 0) AS total_revenue,
      COALESCE(SUM(c.nots_generated), 0) AS achieved_nots,
      base.equity AS base_equity,
      (base.equity * {TARGET_RATE}) / team_commission_threshold() AS monthly_target_nots,
      CASE WHEN base.equity > 0
        THEN (COALESCE(SUM(c.nots_generated), 0) / ((base.equity * {TARGET_RATE}) / team_commission_threshold())) * 100
        ELSE 0 END AS progress_percentage,
      {TODAY_COLUMNS}
    FROM base LEFT JOIN clients c ON true
    GROUP BY base.equity;
    """,
]

DROPS = [
    "DROP VIEW IF EXISTS current_month_dashboard",
    "DROP VIEW IF EXISTS enhanced_dashboard_stats",
    "DROP VIEW IF EXISTS agent_performance_summary",
    "DROP FUNCTION IF EXISTS unlink_client_from_agent(uuid)",
    "DROP FUNCTION IF EXISTS link_client_to_agent(uuid, uuid)",
    "DROP FUNCTION IF EXISTS get_agent_performance(uuid)",
    "DROP FUNCTION IF EXISTS get_monthly_team_stats(integer, integer)",
    "DROP FUNCTION IF EXISTS get_retention_metrics(integer)",
    "DROP FUNCTION IF EXISTS calculate_equity_based_target()",
    "DROP FUNCTION IF EXISTS get_monthly_dashboard_stats(integer, integer)",
    "DROP FUNCTION IF EXISTS reset_monthly_performance(integer, integer)",
    "DROP FUNCTION IF EXISTS set_monthly_base_equity(integer, integer, numeric)",
    "DROP FUNCTION IF EXISTS get_working_days_in_month(integer, integer)",
    "DROP FUNCTION IF EXISTS team_commission_threshold()",
]


def upgrade() -> None:
    for statement in FUNCTIONS + VIEWS:
        op.execute(statement)


def downgrade() -> None:
    for statement in DROPS:
        op.execute(statement)
