from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class UserReview:
    booking_id: uuid.UUID
    text: str
    created_at: datetime
    car_brand: str | None = None
    car_model: str | None = None
    image_data: bytes | None = None  # photo from the gallery, opaque
    id: uuid.UUID = field(default_factory=uuid.uuid4)
