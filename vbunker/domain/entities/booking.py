from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

# Plate recorded for bookings an admin creates without picking a car
UNSPECIFIED_CAR_PLATE = "Не указан"


class BookingStatus(str, Enum):
    active = "active"
    cancelled = "cancelled"
    completed = "completed"


@dataclass(frozen=True)
class Booking:
    service_title: str
    master_name: str
    date: datetime
    time: str  # slot label, "11:00"
    car_plate: str
    created_at: datetime
    status: BookingStatus = BookingStatus.active
    price: int | None = None  # agreed amount, set by admin
    client_phone: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)
