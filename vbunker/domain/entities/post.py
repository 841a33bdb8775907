from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum


ADMIN_AVATAR_NAME = "user_admin"


class PostSource(str, Enum):
    admin = "admin"  # news and promos
    user = "user"  # reviews


@dataclass(frozen=True)
class Post:
    source: PostSource
    author_name: str
    car_name: str  # car or context label, "Новости студии"
    date_string: str
    text: str
    author_avatar_name: str | None = None
    images: tuple[str, ...] = ()  # static asset names
    admin_images_data: tuple[bytes, ...] = ()  # uploaded by admin
    user_image_data: bytes | None = None  # single photo from a review
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self) -> None:
        kinds = sum((bool(self.images), bool(self.admin_images_data), self.user_image_data is not None))
        if kinds > 1:
            raise ValueError("Post images must be asset names, uploaded images or a review photo, not a mix")
