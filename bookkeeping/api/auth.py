"""
Authentication Module

Resolves the bearer token of a request into a SessionContext and checks
capabilities for each route.
"""

from fastapi import Depends, Header

from ..errors import AuthenticationError
from ..store.identity import Capability, IdentityProvider, SessionContext
from .database import get_identity_provider


def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def get_session_context(
    authorization: str | None = Header(None),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> SessionContext:
    """Session context for the request; anonymous when no valid token."""
    return provider.context(bearer_token(authorization))


async def get_current_context(
    ctx: SessionContext = Depends(get_session_context),
) -> SessionContext:
    """Session context of a signed-in user.

    Raises:
        AuthenticationError: If the request carries no valid session
    """
    if ctx.identity is None:
        raise AuthenticationError("Not signed in")
    return ctx


def require_capability(capability: Capability):
    """Dependency factory for capability checks.

    Args:
        capability: Required capability

    Returns:
        Dependency function
    """
    async def check_capability(ctx: SessionContext = Depends(get_current_context)) -> SessionContext:
        ctx.require(capability)
        return ctx

    return check_capability


# Common capability dependencies
require_entries = require_capability(Capability.RECORD_ENTRIES)
require_reports = require_capability(Capability.VIEW_REPORTS)
require_exports = require_capability(Capability.EXPORT_REPORTS)
require_admin = require_capability(Capability.MANAGE_USERS)
