from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UserRole(str, Enum):
    user = "user"
    admin = "admin"

    @staticmethod
    def from_raw(raw: str | None) -> "UserRole":
        try:
            return UserRole(str(raw or "").strip().lower())
        except ValueError:
            return UserRole.user


@dataclass(frozen=True)
class Profile:
    is_logged_in: bool = False
    is_profile_completed: bool = False
    phone: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    avatar_image_data: bytes | None = None
    role: UserRole = UserRole.user

    @property
    def full_name(self) -> str:
        parts = (self.first_name.strip(), self.last_name.strip())
        return " ".join(p for p in parts if p)
