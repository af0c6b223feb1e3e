from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role, StaffPosition


@dataclass(frozen=True)
class User:
    """Domain entity: an admin or a staff member (tendik).

    Note: Plain data object, no DB access code here.
    """

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    position: Optional[StaffPosition] = None
    profile_photo: Optional[str] = None
    is_active: bool = True
