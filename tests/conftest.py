"""
Pytest configuration and fixtures for bookkeeping tests.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine

from bookkeeping.config import DEFAULT_ROLES, Settings
from bookkeeping.models import Role
from bookkeeping.store.identity import DatabaseIdentityProvider, RolePolicy, SessionContext
from bookkeeping.store.record_store import RecordStore

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent

SERVICE_KEY = "test-service-role-key"
PASSWORD = "correct-horse-battery"


@pytest.fixture
def config_dir() -> Path:
    """Return the config directory path."""
    return PROJECT_ROOT / "config"


@pytest.fixture
def store(tmp_path: Path) -> RecordStore:
    """Record store on a fresh SQLite database file."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'bookkeeping.db'}",
        connect_args={"check_same_thread": False},
    )
    record_store = RecordStore(engine)
    record_store.create_schema()
    yield record_store
    engine.dispose()


@pytest.fixture
def policy() -> RolePolicy:
    return RolePolicy(DEFAULT_ROLES)


@pytest.fixture
def provider(store: RecordStore, policy: RolePolicy) -> DatabaseIdentityProvider:
    return DatabaseIdentityProvider(store, policy, service_role_key=SERVICE_KEY)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        service_role_key=SERVICE_KEY,
        business_name="Test Stationery",
        currency="TZS",
        timezone="UTC",
    )


def make_account(
    provider: DatabaseIdentityProvider,
    email: str,
    role: Role = Role.USER,
) -> SessionContext:
    """Sign up, optionally promote, sign in and return the session context."""
    identity = provider.sign_up(email, PASSWORD)
    if role != Role.USER:
        provider.store.update("profiles", {"role": role.value}, eq={"id": identity.user_id})
    session = provider.sign_in(email, PASSWORD)
    return provider.context(session.access_token)


@pytest.fixture
def user_ctx(provider: DatabaseIdentityProvider) -> SessionContext:
    return make_account(provider, "clerk@example.com")


@pytest.fixture
def other_ctx(provider: DatabaseIdentityProvider) -> SessionContext:
    return make_account(provider, "other@example.com")


@pytest.fixture
def admin_ctx(provider: DatabaseIdentityProvider) -> SessionContext:
    return make_account(provider, "owner@example.com", Role.ADMIN)


def add_sale(store, user_id, price, quantity=1, created_at=None, description="Item"):
    return store.insert("sales", {
        "user_id": user_id,
        "description": description,
        "quantity": quantity,
        "price": Decimal(str(price)),
        "created_at": created_at or datetime.now(timezone.utc),
    })


def add_cost(store, user_id, amount, created_at=None, description="Expense"):
    return store.insert("costs", {
        "user_id": user_id,
        "description": description,
        "amount": Decimal(str(amount)),
        "created_at": created_at or datetime.now(timezone.utc),
    })


def days_ago(days: int, hour: int = 12) -> datetime:
    now = datetime.now(timezone.utc)
    return (now - timedelta(days=days)).replace(hour=hour, minute=0, second=0, microsecond=0)
