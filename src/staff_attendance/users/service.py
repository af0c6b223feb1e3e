from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    full_name: str
    role: Role
    position: Optional[str]
    profile_photo: Optional[str]


class AuthService:
    """Use case: authenticate an admin or staff member (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("Failed login for username=%s", user.username)
            raise AuthenticationError("Invalid username or password")

        return SessionUser(
            user_id=user.user_id,
            full_name=user.full_name,
            role=user.role,
            position=user.position.value if user.position else None,
            profile_photo=user.profile_photo,
        )


class StaffDirectory:
    """Read-only view over staff identities used by the attendance core."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_staff(self, staff_id: int) -> User:
        user = self._users.get_by_id(int(staff_id))
        if not user or user.role != Role.STAFF:
            raise NotFoundError("Tendik not found")
        return user

    def exists(self, staff_id: int) -> bool:
        user = self._users.get_by_id(int(staff_id))
        return bool(user and user.role == Role.STAFF)

    def name_of(self, staff_id: int) -> str:
        return self.get_staff(staff_id).full_name
