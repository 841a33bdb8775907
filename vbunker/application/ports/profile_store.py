from abc import ABC, abstractmethod
from typing import Any

# Fixed key names of the persisted session scalars
KEY_IS_LOGGED_IN = "isLoggedIn"
KEY_IS_PROFILE_COMPLETED = "isProfileCompleted"
KEY_USER_PHONE = "userPhone"
KEY_FIRST_NAME = "firstName"
KEY_LAST_NAME = "lastName"
KEY_EMAIL = "email"
KEY_AVATAR_IMAGE_DATA = "avatarImageData"
KEY_USER_ROLE = "userRole"


class ProfileStorePort(ABC):
    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value or None when the key is absent."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str | bool | bytes | None) -> None:
        """Store a value. Setting None removes the key."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, key: str) -> None:
        raise NotImplementedError

    def get_bool(self, key: str) -> bool:
        return bool(self.get(key))

    def get_string(self, key: str) -> str:
        value = self.get(key)
        return value if isinstance(value, str) else ""

    def get_data(self, key: str) -> bytes | None:
        value = self.get(key)
        return value if isinstance(value, bytes) else None
