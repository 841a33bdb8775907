from functools import lru_cache
import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from vbunker.application.booking_flow_state import BookingFlowState
from vbunker.application.ports.profile_store import ProfileStorePort
from vbunker.application.ports.service_catalog import ServiceCatalogPort
from vbunker.core.config import settings
from vbunker.infrastructure.knowledge.service_catalog_data import starter_car
from vbunker.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from vbunker.infrastructure.store.json_store import JsonProfileStore
from vbunker.infrastructure.store.memory_store import MemoryProfileStore


_booking_flow_state: BookingFlowState | None = None


def get_profile_store() -> ProfileStorePort:
    if settings.PROFILE_STORE.lower() == "json":
        return JsonProfileStore(data_dir=settings.PROFILE_DATA_DIR)
    return MemoryProfileStore()


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore()


def get_timezone() -> ZoneInfo:
    try:
        return ZoneInfo(settings.STUDIO_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logging.getLogger(__name__).warning(
            "Unknown studio timezone, falling back to UTC",
            extra={"reason": settings.STUDIO_TIMEZONE},
        )
        return ZoneInfo("UTC")


def build_booking_flow_state() -> BookingFlowState:
    return BookingFlowState(
        profile_store=get_profile_store(),
        catalog=get_service_catalog(),
        timezone=get_timezone(),
        studio_name=settings.STUDIO_NAME,
        starter_cars=[starter_car()],
    )


def get_booking_flow_state() -> BookingFlowState:
    global _booking_flow_state
    if _booking_flow_state is None:
        _booking_flow_state = build_booking_flow_state()
    return _booking_flow_state


def reset_booking_flow_state() -> None:
    """Drop the session state; the next request builds a fresh one."""
    global _booking_flow_state
    _booking_flow_state = None
