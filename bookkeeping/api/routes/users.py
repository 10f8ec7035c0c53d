"""
Users API Routes

Admin-only user management.
"""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from ...models import Credentials, Profile, Role
from ...store.identity import IdentityProvider, SessionContext
from ...store.record_store import RecordStore
from ...users import UserManager
from ..auth import require_admin
from ..database import get_identity_provider, get_store

router = APIRouter(prefix="/users", tags=["users"])


class RoleUpdate(BaseModel):
    role: Role


def get_user_manager(
    store: RecordStore = Depends(get_store),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> UserManager:
    return UserManager(store, provider)


@router.get("", response_model=list[Profile])
async def list_users(
    ctx: SessionContext = Depends(require_admin),
    users: UserManager = Depends(get_user_manager),
) -> list[Profile]:
    return users.list_users(ctx)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: Credentials,
    ctx: SessionContext = Depends(require_admin),
    users: UserManager = Depends(get_user_manager),
) -> dict:
    """Create a user with role 'user'. Needs the service role key."""
    identity = users.create_user(ctx, body.email, body.password)
    return {"message": "User created successfully", "user_id": identity.user_id}


@router.patch("/{user_id}/role", response_model=Profile)
async def update_role(
    user_id: str,
    body: RoleUpdate,
    ctx: SessionContext = Depends(require_admin),
    users: UserManager = Depends(get_user_manager),
) -> Profile:
    return users.set_role(ctx, user_id, body.role)


@router.post("/{user_id}/toggle-role", response_model=Profile)
async def toggle_role(
    user_id: str,
    ctx: SessionContext = Depends(require_admin),
    users: UserManager = Depends(get_user_manager),
) -> Profile:
    return users.toggle_role(ctx, user_id)
