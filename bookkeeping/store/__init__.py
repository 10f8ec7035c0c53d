"""
Store Module

Record store adapter and identity/session handling.
"""

from .identity import (
    AuthEvent,
    Capability,
    DatabaseIdentityProvider,
    Identity,
    IdentityProvider,
    RolePolicy,
    Session,
    SessionContext,
    Subscription,
)
from .record_store import RecordStore

__all__ = [
    "AuthEvent",
    "Capability",
    "DatabaseIdentityProvider",
    "Identity",
    "IdentityProvider",
    "RolePolicy",
    "Session",
    "SessionContext",
    "Subscription",
    "RecordStore",
]
