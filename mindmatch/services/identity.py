"""
Identity Provider - user accounts and credential checks.

Backed by the `users` record store, so the same class serves mock mode
(in-memory store) and live mode (SQL store).
"""

from typing import Any, Dict, Optional

from mindmatch.core.errors import AlreadyRegisteredError, UnauthorizedError
from mindmatch.core.security import hash_password, verify_password
from mindmatch.db.stores import RecordStore
from mindmatch.schemas.schemas import User


def normalize_email(email: str) -> str:
    return email.strip().lower()


class IdentityProvider:

    def __init__(self, users: RecordStore):
        self.users = users

    def get_user_by_email(self, email: str) -> Optional[User]:
        row = self.users.find_one(email=normalize_email(email))
        return User.model_validate(row) if row else None

    def get_user(self, user_id: str) -> User:
        return User.model_validate(self.users.get(user_id))

    def sign_up(self, email: str, password: str, metadata: Dict[str, Any]) -> User:
        """Create the identity record. Raises AlreadyRegisteredError."""
        email = normalize_email(email)
        if self.users.find_one(email=email):
            raise AlreadyRegisteredError("User already registered")
        row = self.users.insert({
            "email": email,
            "password_hash": hash_password(password),
            "user_metadata": dict(metadata),
        })
        return User.model_validate(row)

    def sign_in_with_password(self, email: str, password: str) -> User:
        row = self.users.find_one(email=normalize_email(email))
        if not row or not verify_password(password, row["password_hash"]):
            raise UnauthorizedError("Invalid login credentials")
        return User.model_validate(row)

    def update_metadata(self, user_id: str, metadata: Dict[str, Any]) -> User:
        row = self.users.get(user_id)
        merged = {**(row.get("user_metadata") or {}), **metadata}
        return User.model_validate(self.users.update(user_id, {"user_metadata": merged}))
