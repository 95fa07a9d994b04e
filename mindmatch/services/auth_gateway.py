"""
Auth Gateway - sign-up / sign-in / sign-out and session-change notification.

Sign-up creates, in order:
1. the identity record (users)
2. the base profile (profiles)
3. the role-specific profile (student_profiles / company_profiles)

Steps 2 and 3 are best-effort: a failure there is logged and the sign-up
still succeeds. Nothing is rolled back.

Session state is held by a single AuthState object. Listeners subscribe with
on_auth_state_change() and receive (event, session) on every transition.

HTTP requests never share that state: each works on request_scope(), a
gateway with its own AuthState over the same stores and the same token
denylist. Signing out revokes the session token by its jti.
"""

import itertools
import logging
import uuid
from typing import Any, Callable, Dict, Optional, Set

from mindmatch.core.errors import (
    AlreadyRegisteredError,
    MindMatchError,
    NotFoundError,
    Result,
    UnauthorizedError,
)
from mindmatch.core.security import create_access_token, decode_token
from mindmatch.schemas.schemas import (
    AuthEvent,
    AuthResponse,
    Profile,
    Session,
    SignUpData,
    User,
    UserRole,
)
from mindmatch.services.identity import IdentityProvider
from mindmatch.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)

AuthCallback = Callable[[str, Optional[Session]], Any]


class Subscription:
    """Handle returned by AuthState.subscribe(). unsubscribe() is safe to call twice."""

    def __init__(self, state: "AuthState", key: int):
        self._state = state
        self._key = key

    @property
    def active(self) -> bool:
        return self._state is not None and self._state.has_listener(self._key)

    def unsubscribe(self) -> None:
        if self._state is not None:
            self._state.remove_listener(self._key)
            self._state = None


class AuthState:
    """The process-wide session plus its listeners."""

    def __init__(self):
        self._session: Optional[Session] = None
        self._listeners: Dict[int, AuthCallback] = {}
        self._keys = itertools.count()

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def has_listener(self, key: int) -> bool:
        return key in self._listeners

    def subscribe(self, callback: AuthCallback) -> Subscription:
        key = next(self._keys)
        self._listeners[key] = callback
        return Subscription(self, key)

    def remove_listener(self, key: int) -> None:
        self._listeners.pop(key, None)

    def transition(self, event: AuthEvent, session: Optional[Session]) -> None:
        """Replace the session and notify every listener."""
        self._session = session
        for callback in list(self._listeners.values()):
            try:
                callback(event.value, session)
            except Exception:
                # One broken listener must not starve the others
                logger.exception("Auth state listener failed on %s", event.value)

    def teardown(self) -> None:
        """Drop all listeners; outstanding Subscriptions become inactive."""
        self._listeners.clear()


class AuthGateway:

    def __init__(
        self,
        identity: IdentityProvider,
        profiles: ProfileStore,
        state: Optional[AuthState] = None,
        revoked: Optional[Set[str]] = None,
    ):
        self.identity = identity
        self.profiles = profiles
        self.state = state or AuthState()
        self.revoked = revoked if revoked is not None else set()

    def request_scope(self) -> "AuthGateway":
        """A gateway with a private session, sharing stores and revocations."""
        return AuthGateway(self.identity, self.profiles, AuthState(), self.revoked)

    def issue_session(self, user: User) -> Session:
        token, expires_at = create_access_token({
            "sub": user.id,
            "email": user.email,
            "role": user.role,
            "jti": uuid.uuid4().hex,
        })
        return Session(access_token=token, expires_at=expires_at, user=user)

    # ---------------- sign-up ----------------

    def sign_up(self, email: str, password: str, data: SignUpData) -> Result[AuthResponse]:
        try:
            if self.identity.get_user_by_email(email) is not None:
                return Result.failure(AlreadyRegisteredError("User already registered"))
            role = UserRole(data.role)
            user = self.identity.sign_up(
                email, password, {"full_name": data.full_name, "role": role.value}
            )
        except MindMatchError as e:
            logger.error("Signup error: %s", e.message)
            return Result.failure(e)

        self._create_profiles(user, role, data)

        session = self.issue_session(user)
        self.state.transition(AuthEvent.signed_in, session)
        return Result.success(AuthResponse(user=user, session=session))

    def _create_profiles(self, user: User, role: UserRole, data: SignUpData) -> None:
        profile = self.profiles.create({
            "id": user.id,
            "email": user.email,
            "full_name": data.full_name,
            "role": role.value,
        })
        if profile.error:
            logger.warning("Profile creation error for %s: %s", user.id, profile.error.message)

        if role == UserRole.student and data.college_name:
            student = self.profiles.create_student_profile(user.id, data.college_name)
            if student.error:
                logger.warning(
                    "Student profile creation error for %s: %s", user.id, student.error.message
                )

        if role == UserRole.company and data.company_name:
            company = self.profiles.create_company_profile(user.id, data.company_name)
            if company.error:
                logger.warning(
                    "Company profile creation error for %s: %s", user.id, company.error.message
                )

    # ---------------- sessions ----------------

    def sign_in(self, email: str, password: str) -> Result[AuthResponse]:
        try:
            user = self.identity.sign_in_with_password(email, password)
        except MindMatchError as e:
            logger.error("Signin error: %s", e.message)
            return Result.failure(e)
        session = self.issue_session(user)
        self.state.transition(AuthEvent.signed_in, session)
        return Result.success(AuthResponse(user=user, session=session))

    def sign_out(self) -> Result[None]:
        if self.state.session is not None:
            self.revoke_token(self.state.session.access_token)
            self.state.transition(AuthEvent.signed_out, None)
        return Result.success(None)

    def refresh_session(self) -> Result[Session]:
        current = self.state.session
        if current is None:
            return Result.failure(UnauthorizedError("No active session"))
        session = self.issue_session(current.user)
        self.revoke_token(current.access_token)
        self.state.transition(AuthEvent.token_refreshed, session)
        return Result.success(session)

    def refresh_token(self, token: str) -> Result[Session]:
        """Swap a valid bearer token for a new one; the old token is revoked."""
        user = self.user_from_token(token)
        if user is None:
            return Result.failure(UnauthorizedError("Invalid or expired token"))
        session = self.issue_session(user)
        self.revoke_token(token)
        return Result.success(session)

    def revoke_token(self, token: str) -> None:
        payload = decode_token(token)
        if payload and payload.get("jti"):
            self.revoked.add(payload["jti"])

    def get_session(self) -> Optional[Session]:
        return self.state.session

    def get_current_user(self) -> Optional[User]:
        session = self.state.session
        return session.user if session else None

    def on_auth_state_change(self, callback: AuthCallback) -> Subscription:
        return self.state.subscribe(callback)

    def user_from_token(self, token: str) -> Optional[User]:
        """Resolve a bearer token to its user, or None when invalid/unknown."""
        payload = decode_token(token)
        if not payload or not payload.get("sub"):
            return None
        if payload.get("jti") in self.revoked:
            return None
        try:
            return self.identity.get_user(payload["sub"])
        except NotFoundError:
            return None

    # ---------------- profile ----------------

    def get_profile(self, user_id: str) -> Result[Profile]:
        return self.profiles.get(user_id)

    def update_profile(self, user_id: str, updates: Dict[str, Any]) -> Result[Profile]:
        result = self.profiles.update(user_id, updates)
        if result.error:
            return result
        if "full_name" in updates:
            try:
                user = self.identity.update_metadata(user_id, {"full_name": updates["full_name"]})
            except MindMatchError as e:
                logger.warning("User metadata update error for %s: %s", user_id, e.message)
            else:
                current = self.state.session
                if current is not None and current.user.id == user_id:
                    refreshed = current.model_copy(update={"user": user})
                    self.state.transition(AuthEvent.user_updated, refreshed)
        return result
