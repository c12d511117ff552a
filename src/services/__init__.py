"""Database connection and session management."""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.services.config import get_settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine (SQLite uses StaticPool for simplicity in dev/test)."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, echo=echo, pool_pre_ping=True)


_settings = get_settings()
engine = build_engine(_settings.database_url, echo=_settings.sql_echo)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine | None = None) -> None:
    """Create all tables that do not exist yet."""
    from src.models import Base

    Base.metadata.create_all(bind or engine)


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "build_engine",
    "engine",
    "SessionLocal",
    "init_db",
    "get_db",
]
