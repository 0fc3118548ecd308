from __future__ import annotations

import uuid
from typing import Any, TypeVar

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.errors import DataServiceError, UnauthorizedError
from app.services.data_service import database_message

ModelT = TypeVar("ModelT")


def coerce_uuid(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid id: {value}") from exc


def get_or_404(db: Session, model: type[ModelT], record_id: Any, detail: str | None = None) -> ModelT:
    record = db.get(model, coerce_uuid(record_id))
    if record is None:
        raise HTTPException(status_code=404, detail=detail or f"{model.__name__} not found")
    return record


def require_admin(is_admin: bool, detail: str = "Unauthorized") -> None:
    if not is_admin:
        raise UnauthorizedError(detail)


def commit_or_raise(db: Session, fallback: str, conflict_detail: str | None = None) -> None:
    """Commit, mapping unique violations to 409 and other driver errors to ``DataServiceError``."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=409, detail=conflict_detail or database_message(exc) or fallback) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataServiceError(database_message(exc) or fallback) from exc


def apply_ordering(query: Query, order_by: str, order_dir: str, allowed_columns: dict[str, Any]) -> Query:
    if order_by not in allowed_columns:
        allowed = ", ".join(sorted(allowed_columns))
        raise HTTPException(status_code=400, detail=f"Invalid order_by. Allowed: {allowed}")
    column = allowed_columns[order_by]
    if order_dir == "asc":
        return query.order_by(column.asc())
    return query.order_by(column.desc())


def apply_pagination(query: Query, limit: int, offset: int) -> Query:
    return query.limit(limit).offset(offset)


def validate_month_year(month: int, year: int) -> None:
    if not 1 <= month <= 12:
        raise HTTPException(status_code=400, detail="month must be between 1 and 12")
    if year < 2020:
        raise HTTPException(status_code=400, detail="year must be 2020 or later")
