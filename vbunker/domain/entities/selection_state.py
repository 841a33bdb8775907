from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from vbunker.domain.entities.car import CarItem
from vbunker.domain.entities.service_catalog import Master, ServiceItem


@dataclass(frozen=True)
class SelectionState:
    """Booking draft the customer (or admin) fills step by step."""

    service: ServiceItem | None = None
    master: Master | None = None
    date: datetime | None = None
    time: str | None = None
    car: CarItem | None = None

    @property
    def is_complete(self) -> bool:
        return self.is_complete_for_admin and self.car is not None

    @property
    def is_complete_for_admin(self) -> bool:
        # admin bookings skip the car step
        return (
            self.service is not None
            and self.master is not None
            and self.date is not None
            and self.time is not None
        )

    @property
    def is_empty(self) -> bool:
        return self == SelectionState()
