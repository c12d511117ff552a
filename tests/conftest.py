"""Pytest configuration for tests - isolated in-memory database per test."""

import os

# Set test database URL BEFORE any imports from src
# This ensures the SessionLocal and engine use an in-memory database
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.models import Base, User  # noqa: E402
from src.services.request_context import RequestContext  # noqa: E402


@pytest.fixture
def db_session():
    """Create test database session."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def admin_user(db_session):
    """Create a staff user acting as the actor."""
    user = User(
        name="Alice Admin",
        email="alice@example.com",
        password="$2y$12$hashedpassword",
        remember_token="remember-me",
        two_factor_secret="secret",
        two_factor_recovery_codes='["code-1", "code-2"]',
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def context(admin_user):
    """Request context attributed to the admin user."""
    return RequestContext(
        actor_id=admin_user.id,
        origin_address="203.0.113.7",
        origin_agent="Mozilla/5.0 (TestBrowser)",
    )
