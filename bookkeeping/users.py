"""
User Management Module

Admin-only profile listing, role changes and account creation.
"""

import logging

from .errors import InvalidInputError, NotFoundError, RemoteCallError
from .models import Profile, Role
from .store.identity import Capability, Identity, IdentityProvider, SessionContext
from .store.record_store import RecordStore

logger = logging.getLogger(__name__)


class UserManager:
    """Profile administration on top of the record store and identity provider."""

    def __init__(self, store: RecordStore, provider: IdentityProvider):
        self.store = store
        self.provider = provider

    def list_users(self, ctx: SessionContext) -> list[Profile]:
        ctx.require(Capability.MANAGE_USERS)
        try:
            rows = self.store.select("profiles", columns=["id", "email", "role"], order_by="email")
        except RemoteCallError as e:
            logger.error(f"Error fetching users: {e}")
            raise RemoteCallError("Failed to fetch users. Please try again.") from e
        return [Profile(**row) for row in rows]

    def set_role(self, ctx: SessionContext, user_id: str, role: Role | str) -> Profile:
        """Change a user's role.

        Raises:
            InvalidInputError: If role is not admin or user
            NotFoundError: If the user has no profile
        """
        admin = ctx.require(Capability.MANAGE_USERS)
        try:
            role = Role(role)
        except ValueError:
            raise InvalidInputError(
                "Invalid input",
                details=[{"loc": ["role"], "msg": f"role must be one of {[r.value for r in Role]}"}],
            ) from None

        try:
            rows = self.store.update("profiles", {"role": role.value}, eq={"id": user_id})
        except RemoteCallError as e:
            logger.error(f"Error updating user role: {e}")
            raise RemoteCallError("Failed to update user role. Please try again.") from e

        if not rows:
            raise NotFoundError(f"No profile for user {user_id}")

        logger.info(f"Admin {admin.user_id} set role of {user_id} to {role.value}")
        return Profile(**rows[0])

    def toggle_role(self, ctx: SessionContext, user_id: str) -> Profile:
        """Flip a user between admin and user."""
        ctx.require(Capability.MANAGE_USERS)
        profile = Profile(**self.store.select_one("profiles", eq={"id": user_id}))
        new_role = Role.USER if profile.role == Role.ADMIN else Role.ADMIN
        return self.set_role(ctx, user_id, new_role)

    def create_user(self, ctx: SessionContext, email: str, password: str) -> Identity:
        return self.provider.admin_create_user(ctx, email, password)

    def sign_up(self, email: str, password: str) -> Identity:
        return self.provider.sign_up(email, password)
