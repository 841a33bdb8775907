from __future__ import annotations

import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CarItem:
    number: str  # plate number, e.g. "О212УС31"
    brand: str | None = None
    model: str | None = None
    year: int | None = None
    body_type: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
