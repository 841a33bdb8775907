from __future__ import annotations

import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ServiceItem:
    title: str  # "Тонировка"
    area: str  # "Передние стекла"
    duration: str  # "60 минут"
    price: str  # "4400 ₽"
    image_name: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @property
    def display_title(self) -> str:
        return f"{self.title} {self.area}"


@dataclass(frozen=True)
class ServiceCategory:
    title: str
    services: tuple[ServiceItem, ...]
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class Master:
    name: str
    role: str
    next_day_label: str
    time_slots: tuple[str, ...] = ()
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class AdminService:
    """Service card as the admin edits it on the services screen."""

    category: str
    title: str
    price_text: str  # "от 4400 ₽"
    duration_minutes: int | None = None
    image_data: bytes | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass(frozen=True)
class AdminMaster:
    name: str
    categories: frozenset[str] = frozenset()  # service categories the master works with
    image_data: bytes | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
