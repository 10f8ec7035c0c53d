"""
Database Connection Module

Builds the SQLAlchemy engine, record store and identity provider used by
the API, and exposes them as FastAPI dependencies.
"""

from datetime import timedelta
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from ..config import Settings, get_settings
from ..store.identity import DatabaseIdentityProvider, IdentityProvider, RolePolicy
from ..store.record_store import RecordStore


def build_engine(settings: Settings) -> Engine:
    if settings.database_url.startswith("sqlite"):
        return create_engine(settings.database_url, connect_args={"check_same_thread": False})
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


@lru_cache
def get_store() -> RecordStore:
    """Record store for FastAPI dependency injection."""
    return RecordStore(build_engine(get_settings()))


@lru_cache
def get_identity_provider() -> IdentityProvider:
    """Identity provider for FastAPI dependency injection."""
    settings = get_settings()
    return DatabaseIdentityProvider(
        get_store(),
        RolePolicy(settings.roles),
        service_role_key=settings.service_role_key,
        session_ttl=timedelta(minutes=settings.session_ttl_minutes),
    )
