from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from app.config import settings


class Base(DeclarativeBase):
    pass


_engine = None


def get_engine():
    global _engine
    if _engine is None:
        _engine = create_engine(
            settings.database_url,
            pool_pre_ping=True,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
        )
    return _engine


SessionLocal = sessionmaker(autoflush=False, autocommit=False)


def get_db():
    """Centralized database session dependency for FastAPI.

    Yields a database session and ensures it is closed after the request.
    The engine is bound on first use so importing the app does not open a
    connection pool.

    Example:
        @router.get("/clients")
        def list_clients(db: Session = Depends(get_db)):
            return db.query(Client).all()
    """
    db = SessionLocal(bind=get_engine())
    try:
        yield db
    finally:
        db.close()
