"""
Identity Module

Session context, capabilities and identity providers.

The acting user is never held in global state: every operation receives a
SessionContext, and components that need to follow sign-in/sign-out
register a callback on the context or the provider.
"""

import logging
import secrets
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable

from werkzeug.security import check_password_hash, generate_password_hash

from ..errors import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
)
from ..models import Credentials, Profile, Role
from .record_store import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(hours=12)


class Capability(str, Enum):
    """Operations an identity may be allowed to perform."""
    RECORD_ENTRIES = "record_entries"
    VIEW_REPORTS = "view_reports"
    EXPORT_REPORTS = "export_reports"
    MANAGE_USERS = "manage_users"


class AuthEvent(str, Enum):
    """Session change notifications."""
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    ROLE_CHANGED = "ROLE_CHANGED"


@dataclass(frozen=True)
class Identity:
    """The acting user."""

    user_id: str
    email: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass
class Session:
    """An authenticated session."""

    access_token: str
    identity: Identity
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def expired(self, ttl: timedelta, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now - self.created_at >= ttl


# Context listeners get (event, new identity)
Listener = Callable[[AuthEvent, Identity | None], None]

# Provider listeners also get the access token of the session that changed
ProviderListener = Callable[[AuthEvent, str, Identity | None], None]


class Subscription:
    """Handle returned by subscribe(); call unsubscribe() to stop updates."""

    def __init__(self, listeners: list, callback: Callable):
        self._listeners = listeners
        self.callback = callback

    def unsubscribe(self) -> None:
        if self.callback in self._listeners:
            self._listeners.remove(self.callback)


class RolePolicy:
    """Maps roles to capabilities, from the `roles:` config section."""

    def __init__(self, roles: dict[str, list[str]]):
        self.roles = roles

    def capabilities(self, role: Role | str) -> set[Capability]:
        granted = self.roles.get(Role(role).value, [])
        if "*" in granted:
            return set(Capability)
        return {Capability(name) for name in granted if name in Capability._value2member_map_}

    def allows(self, role: Role | str, capability: Capability) -> bool:
        return capability in self.capabilities(role)


class SessionContext:
    """Explicit identity context passed to every operation."""

    def __init__(self, identity: Identity | None, policy: RolePolicy, access_token: str | None = None):
        self._identity = identity
        self.policy = policy
        self.access_token = access_token
        self._listeners: list[Listener] = []
        self._provider_subscription: Subscription | None = None

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def user_id(self) -> str:
        return self.require_identity().user_id

    @property
    def capabilities(self) -> set[Capability]:
        if self._identity is None:
            return set()
        return self.policy.capabilities(self._identity.role)

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def require_identity(self) -> Identity:
        if self._identity is None:
            raise AuthenticationError("Not signed in")
        return self._identity

    def require(self, capability: Capability) -> Identity:
        """Check the acting identity holds a capability.

        Raises:
            AuthenticationError: If there is no identity
            AuthorizationError: If the role lacks the capability
        """
        identity = self.require_identity()
        if not self.policy.allows(identity.role, capability):
            raise AuthorizationError(f"Capability '{capability.value}' required")
        return identity

    def set_identity(self, identity: Identity | None, event: AuthEvent) -> None:
        self._identity = identity
        for callback in list(self._listeners):
            callback(event, identity)

    def subscribe(self, callback: Listener) -> Subscription:
        self._listeners.append(callback)
        return Subscription(self._listeners, callback)

    def unsubscribe(self, callback: Listener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def bind(self, provider: "IdentityProvider") -> Subscription:
        """Follow a provider's notifications for this context's own session."""
        if self._provider_subscription is not None:
            self._provider_subscription.unsubscribe()
        self._provider_subscription = provider.subscribe(self._on_provider_event)
        return self._provider_subscription

    def _on_provider_event(self, event: AuthEvent, access_token: str, identity: Identity | None) -> None:
        if self.access_token is None or access_token != self.access_token:
            return
        if event == AuthEvent.SIGNED_OUT:
            self.access_token = None
        self.set_identity(identity, event)

    def sign_in(self, provider: "IdentityProvider", email: str, password: str) -> Identity:
        """Sign in through a provider and make the new session this context's."""
        session = provider.sign_in(email, password)
        self.access_token = session.access_token
        self.set_identity(session.identity, AuthEvent.SIGNED_IN)
        return session.identity

    def sign_out(self, provider: "IdentityProvider") -> None:
        """End this context's session."""
        token = self.access_token
        if token is None:
            return
        provider.sign_out(token)
        # A bound context has already been cleared by the provider event
        if self.access_token is not None:
            self.access_token = None
            self.set_identity(None, AuthEvent.SIGNED_OUT)


class IdentityProvider(ABC):
    """Session and account operations of an identity service."""

    def __init__(self, policy: RolePolicy):
        self.policy = policy
        self._listeners: list[ProviderListener] = []

    def subscribe(self, callback: ProviderListener) -> Subscription:
        self._listeners.append(callback)
        return Subscription(self._listeners, callback)

    def _notify(self, event: AuthEvent, access_token: str, identity: Identity | None) -> None:
        for callback in list(self._listeners):
            try:
                callback(event, access_token, identity)
            except Exception as e:
                logger.error(f"Session listener failed on {event.value}: {e}")

    def context(self, token: str | None) -> SessionContext:
        """Build a SessionContext for a bearer token (anonymous if invalid)."""
        session = self.get_session(token) if token else None
        if session is None:
            return SessionContext(None, self.policy)
        return SessionContext(session.identity, self.policy, access_token=session.access_token)

    @abstractmethod
    def get_session(self, token: str) -> Session | None:
        """Return the live session for a token, or None."""

    @abstractmethod
    def sign_in(self, email: str, password: str) -> Session:
        """Authenticate with credentials."""

    @abstractmethod
    def sign_out(self, token: str) -> None:
        """End a session."""

    @abstractmethod
    def sign_up(self, email: str, password: str) -> Identity:
        """Self-service account creation."""

    @abstractmethod
    def admin_create_user(self, ctx: SessionContext, email: str, password: str) -> Identity:
        """Privileged account creation, requires the service credential."""


class DatabaseIdentityProvider(IdentityProvider):
    """Identity provider keeping accounts in the record store."""

    def __init__(
        self,
        store: RecordStore,
        policy: RolePolicy,
        service_role_key: str | None = None,
        session_ttl: timedelta = DEFAULT_SESSION_TTL,
    ):
        """Initialize the provider.

        Args:
            store: Record store holding auth_users and profiles
            policy: Role to capability mapping
            service_role_key: Elevated credential for admin user creation
            session_ttl: Lifetime of a session from sign-in
        """
        super().__init__(policy)
        self.store = store
        self.service_role_key = service_role_key
        self.session_ttl = session_ttl
        self._sessions: dict[str, Session] = {}

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    def get_profile(self, user_id: str) -> Profile | None:
        """Load a profile; a missing profile is reported as None."""
        try:
            row = self.store.select_one("profiles", eq={"id": user_id})
        except NotFoundError:
            logger.warning(f"No profile found for user {user_id}")
            return None
        return Profile(**row)

    def _identity(self, user_id: str, email: str) -> Identity:
        profile = self.get_profile(user_id)
        role = profile.role if profile else Role.USER
        return Identity(user_id=user_id, email=email, role=role)

    def _expire(self, session: Session) -> None:
        self._sessions.pop(session.access_token, None)
        logger.info(f"Session of user {session.identity.user_id} expired")
        self._notify(AuthEvent.SIGNED_OUT, session.access_token, None)

    def evict_expired(self, now: datetime | None = None) -> int:
        """Drop every session older than the TTL.

        Returns:
            Number of sessions dropped
        """
        stale = [s for s in self._sessions.values() if s.expired(self.session_ttl, now)]
        for session in stale:
            self._expire(session)
        return len(stale)

    def get_session(self, token: str) -> Session | None:
        session = self._sessions.get(token)
        if session is None:
            return None
        if session.expired(self.session_ttl):
            self._expire(session)
            return None

        # Role is re-read so admin changes apply to live sessions
        identity = self._identity(session.identity.user_id, session.identity.email)
        if identity.role != session.identity.role:
            session.identity = identity
            self._notify(AuthEvent.ROLE_CHANGED, session.access_token, identity)
        return session

    def sign_in(self, email: str, password: str) -> Session:
        self.evict_expired()
        email = email.strip().lower()
        try:
            account = self.store.select_one("auth_users", eq={"email": email})
        except NotFoundError:
            raise AuthenticationError("Invalid login credentials") from None

        if not check_password_hash(account["password_hash"], password):
            raise AuthenticationError("Invalid login credentials")

        session = Session(
            access_token=secrets.token_urlsafe(32),
            identity=self._identity(account["id"], account["email"]),
        )
        self._sessions[session.access_token] = session
        logger.info(f"User {account['id']} signed in")
        self._notify(AuthEvent.SIGNED_IN, session.access_token, session.identity)
        return session

    def sign_out(self, token: str) -> None:
        session = self._sessions.pop(token, None)
        if session is not None:
            logger.info(f"User {session.identity.user_id} signed out")
            self._notify(AuthEvent.SIGNED_OUT, token, None)

    def _create_account(self, email: str, password: str) -> Identity:
        credentials = Credentials(email=email, password=password)
        existing = self.store.select("auth_users", columns=["id"], eq={"email": credentials.email})
        if existing:
            raise InvalidInputError("User already registered")

        user_id = str(uuid.uuid4())
        try:
            self.store.insert_many([
                ("auth_users", {
                    "id": user_id,
                    "email": credentials.email,
                    "password_hash": generate_password_hash(credentials.password),
                }),
                ("profiles", {
                    "id": user_id,
                    "email": credentials.email,
                    "role": Role.USER.value,
                }),
            ])
        except ConflictError:
            # Lost a race with a concurrent sign-up for the same email
            raise InvalidInputError("User already registered") from None
        return Identity(user_id=user_id, email=credentials.email, role=Role.USER)

    def sign_up(self, email: str, password: str) -> Identity:
        identity = self._create_account(email, password)
        logger.info(f"User {identity.user_id} signed up")
        return identity

    def admin_create_user(self, ctx: SessionContext, email: str, password: str) -> Identity:
        if not self.service_role_key:
            logger.error("Admin user creation requested but BOOKKEEPING_SERVICE_ROLE_KEY is not set")
            raise ConfigurationError("Server configuration error")
        admin = ctx.require(Capability.MANAGE_USERS)

        identity = self._create_account(email, password)
        logger.info(f"Admin {admin.user_id} created user {identity.user_id}")
        return identity
