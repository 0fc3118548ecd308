"""Gateway to the stored procedures and views that live in the database.

Aggregation, targets and monthly rollovers are computed server-side. This
module only builds the call, binds parameters by name and turns driver
failures into ``DataServiceError`` carrying the database's own message.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import DataServiceError
from app.observability import RPC_CALLS, RPC_DURATION
from app.telemetry import get_tracer

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")
_SET_ACTOR = "SELECT set_config('app.actor', :actor, true)"


def _check_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid database identifier: {name!r}")
    return name


def _call_sql(procedure: str, params: Mapping[str, Any], *, set_returning: bool) -> str:
    args = ", ".join(f"{_check_identifier(key)} => :{key}" for key in params)
    call = f"{_check_identifier(procedure)}({args})"
    return f"SELECT * FROM {call}" if set_returning else f"SELECT {call}"


def database_message(exc: SQLAlchemyError) -> str:
    """First line of the driver's error text, without SQLAlchemy's statement echo."""
    orig = getattr(exc, "orig", None)
    raw = str(orig if orig is not None else exc).strip()
    return raw.splitlines()[0].strip() if raw else ""


def _run(
    db: Session,
    name: str,
    statement: str,
    params: Mapping[str, Any],
    fetch,
    *,
    commit: bool = False,
    actor: str | None = None,
):
    tracer = get_tracer(__name__)
    started = time.perf_counter()
    with tracer.start_as_current_span(f"db.{name}"):
        try:
            if actor is not None:
                # transaction-local; procedures read it with current_setting('app.actor', true)
                db.execute(text(_SET_ACTOR), {"actor": actor})
            result = fetch(db.execute(text(statement), dict(params)))
            if commit:
                db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            RPC_CALLS.labels(procedure=name, status="error").inc()
            message = database_message(exc)
            logger.warning("Database call %s failed: %s", name, message or exc.__class__.__name__)
            raise DataServiceError(message, procedure=name) from exc
        finally:
            RPC_DURATION.labels(procedure=name).observe(time.perf_counter() - started)
    RPC_CALLS.labels(procedure=name, status="success").inc()
    return result


def rpc(
    db: Session,
    procedure: str,
    params: Mapping[str, Any] | None = None,
    *,
    commit: bool = False,
    actor: str | None = None,
) -> Any:
    """Call a scalar-returning procedure (json, a row type, ...) and return its value.

    ``actor`` is stored as the transaction-local ``app.actor`` setting on the
    same session right before the call, for procedures that record who ran them.
    """
    params = params or {}
    statement = _call_sql(procedure, params, set_returning=False)
    return _run(db, procedure, statement, params, lambda result: result.scalar(), commit=commit, actor=actor)


def rpc_rows(
    db: Session, procedure: str, params: Mapping[str, Any] | None = None, *, commit: bool = False
) -> list[dict[str, Any]]:
    """Call a set-returning procedure and return its rows as dicts."""
    params = params or {}
    statement = _call_sql(procedure, params, set_returning=True)
    return _run(
        db,
        procedure,
        statement,
        params,
        lambda result: [dict(row) for row in result.mappings().all()],
        commit=commit,
    )


def select_rows(db: Session, relation: str, order_by: str | None = None, descending: bool = False) -> list[dict[str, Any]]:
    """Read every row of a view or table."""
    statement = f"SELECT * FROM {_check_identifier(relation)}"
    if order_by:
        statement += f" ORDER BY {_check_identifier(order_by)} {'DESC' if descending else 'ASC'}"
    return _run(db, relation, statement, {}, lambda result: [dict(row) for row in result.mappings().all()])


def select_single(db: Session, relation: str) -> dict[str, Any]:
    """Read a view that must yield exactly one row."""
    statement = f"SELECT * FROM {_check_identifier(relation)} LIMIT 2"
    rows = _run(db, relation, statement, {}, lambda result: [dict(row) for row in result.mappings().all()])
    if len(rows) != 1:
        raise DataServiceError(
            f"Expected a single row from {relation}, got {len(rows)}",
            procedure=relation,
        )
    return rows[0]


@contextmanager
def fallback_message(fallback: str) -> Iterator[None]:
    """Give a ``DataServiceError`` raised without a message the operation's own wording."""
    try:
        yield
    except DataServiceError as exc:
        if exc.detail:
            raise
        raise DataServiceError(fallback, procedure=exc.procedure) from exc
