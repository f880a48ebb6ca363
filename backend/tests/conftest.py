# backend/tests/conftest.py
"""
Pytest configuration and fixtures.

This module provides shared fixtures for all tests:
- Test environment variables (set BEFORE any balance_tracker import)
- Database session fixtures (in-memory SQLite)
- Sample data factories (roles, users, accounts, balances)
- Auth header helpers
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-at-least-32-chars-long")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterator

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from balance_tracker.database import configure_sqlite_engine
from balance_tracker.models import (
    Account,
    Base,
    BalanceRecord,
    Role,
    RoleName,
    User,
)
from balance_tracker.services.auth.jwt_handler import JWTHandler
from balance_tracker.services.auth.password import PasswordService


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = configure_sqlite_engine(create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    ))
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture(scope="function")
def db(db_engine) -> Iterator[Session]:
    """Create a database session for testing."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =============================================================================
# SAMPLE DATA FACTORIES
# =============================================================================

def create_role(db: Session, name: str) -> Role:
    """Return the role with this name, creating it if needed."""
    role = db.execute(select(Role).where(Role.name == name)).scalar_one_or_none()
    if role is None:
        role = Role(name=name)
        db.add(role)
        db.commit()
        db.refresh(role)
    return role


def create_user(
        db: Session,
        username: str = "admin",
        email: str | None = None,
        password: str = "Admin@123",
        roles: tuple[str, ...] = (RoleName.ADMIN,),
        is_active: bool = True,
) -> User:
    """Factory function for creating User entities in the database."""
    user = User(
        username=username,
        email=email or f"{username}@example.com",
        hashed_password=PasswordService.hash_password(password),
        is_active=is_active,
        roles=[create_role(db, name) for name in roles],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_account(db: Session, name: str, is_active: bool = True) -> Account:
    """Factory function for creating Account entities in the database."""
    account = Account(name=name, is_active=is_active)
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def create_balance(
        db: Session,
        account: Account,
        user: User,
        year: int,
        month: int,
        amount: str | Decimal,
        uploaded_at: datetime | None = None,
) -> BalanceRecord:
    """Factory function for creating BalanceRecord entities in the database."""
    record = BalanceRecord(
        account_id=account.id,
        year=year,
        month=month,
        amount=Decimal(amount),
        uploaded_by=user.id,
        uploaded_at=uploaded_at or datetime.now(timezone.utc),
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def get_auth_headers(user: User) -> dict[str, str]:
    """Generate bearer auth headers for a user."""
    issued = JWTHandler.create_access_token(
        user_id=user.id,
        username=user.username,
        email=user.email,
        roles=user.role_names,
    )
    return {"Authorization": f"Bearer {issued.token}"}


# =============================================================================
# FIXTURE EXPORTS
# =============================================================================

@pytest.fixture
def admin_user(db: Session) -> User:
    """Provide an active Admin user."""
    return create_user(db)


@pytest.fixture
def regular_user(db: Session) -> User:
    """Provide an active User-role user."""
    return create_user(
        db,
        username="john.doe",
        password="User@123",
        roles=(RoleName.USER,),
    )


@pytest.fixture
def default_accounts(db: Session) -> dict[str, Account]:
    """The five standard accounts, keyed by name."""
    names = ["R&D", "Canteen", "CEO's car expenses", "Marketing", "Parking fines"]
    return {name: create_account(db, name) for name in names}
