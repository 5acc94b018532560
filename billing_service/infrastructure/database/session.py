"""Database engine and session management"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from billing_service.config import settings


def build_engine(database_url: str) -> Engine:
    """
    Engine for the loan store.

    In-memory SQLite keeps one shared connection so every thread sees the
    same loans. Server databases get a pre-pinged, recycled pool sized from
    settings.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """Request-scoped session, closed once the response is sent"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
