import sqlite3
import uuid
from dataclasses import replace

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import Base

# Register UUID adapter for SQLite - store as string
sqlite3.register_adapter(uuid.UUID, lambda u: str(u))

# Monkey-patch SQLAlchemy's UUID type for SQLite compatibility
# This must happen before any models are imported
from sqlalchemy.sql import sqltypes  # noqa: E402

_original_uuid_bind_processor = sqltypes.Uuid.bind_processor
_original_uuid_result_processor = sqltypes.Uuid.result_processor


def _sqlite_uuid_bind_processor(self, dialect):
    if dialect.name == "sqlite":
        def process(value):
            if value is not None:
                if isinstance(value, uuid.UUID):
                    return str(value)
                return str(uuid.UUID(value)) if value else None
            return None
        return process
    return _original_uuid_bind_processor(self, dialect)


def _sqlite_uuid_result_processor(self, dialect, coltype):
    if dialect.name == "sqlite":
        def process(value):
            if value is not None:
                if isinstance(value, uuid.UUID):
                    return value
                return uuid.UUID(value) if value else None
            return None
        return process
    return _original_uuid_result_processor(self, dialect, coltype)


sqltypes.Uuid.bind_processor = _sqlite_uuid_bind_processor
sqltypes.Uuid.result_processor = _sqlite_uuid_result_processor

import app.models  # noqa: F401,E402
from app.models.agent import Agent  # noqa: E402
from app.models.client import Client  # noqa: E402
from app.models.product import Product  # noqa: E402


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(bind=connection, autoflush=False, autocommit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


def _unique_email() -> str:
    return f"agent-{uuid.uuid4().hex}@example.com"


@pytest.fixture()
def agent(db_session):
    agent = Agent(name="Ayesha Khan", email=_unique_email(), phone="+92-300-0000000", commission_rate=0.05)
    db_session.add(agent)
    db_session.commit()
    db_session.refresh(agent)
    return agent


@pytest.fixture()
def client(db_session, agent):
    client = Client(
        name=f"Client {uuid.uuid4().hex[:8]}",
        margin_in=12000,
        overall_margin=50000,
        invested_amount=40000,
        monthly_revenue=3000,
        nots_generated=2,
        agent_id=agent.id,
    )
    db_session.add(client)
    db_session.commit()
    db_session.refresh(client)
    return client


@pytest.fixture()
def product(db_session):
    product = Product(
        name=f"Gold {uuid.uuid4().hex[:6]}",
        commission_usd=2.5,
        tick_size=0.1,
        tick_value=1.0,
        price_quote=2350.0,
    )
    db_session.add(product)
    db_session.commit()
    db_session.refresh(product)
    return product


@pytest.fixture()
def auth_settings(monkeypatch):
    """Token settings used by the auth dependency during a test."""
    from app.services import auth_dependencies

    patched = replace(
        auth_dependencies.settings,
        jwt_secret="test-secret",
        jwt_algorithm="HS256",
        jwt_audience=None,
        admin_emails=("boss@example.com",),
    )
    monkeypatch.setattr(auth_dependencies, "settings", patched)
    return patched


@pytest.fixture()
def admin_auth():
    return {"user_id": "admin-1", "email": "boss@example.com", "roles": ["admin"], "is_admin": True}


@pytest.fixture()
def user_auth():
    return {"user_id": "user-1", "email": "viewer@example.com", "roles": [], "is_admin": False}
