from __future__ import annotations

import uuid

from vbunker.application.ports.service_catalog import ServiceCatalogPort
from vbunker.domain.entities.post import Post
from vbunker.domain.entities.service_catalog import AdminMaster, AdminService, Master, ServiceCategory, ServiceItem
from vbunker.infrastructure.knowledge.service_catalog_data import (
    ADMIN_MASTERS,
    ADMIN_SERVICES,
    MASTERS,
    NEWS_POSTS,
    PROMO_POSTS,
    REVIEW_POSTS,
    SERVICE_CATEGORIES,
    TIME_SLOTS,
)


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(
        self,
        categories: tuple[ServiceCategory, ...] | None = None,
        masters: tuple[Master, ...] | None = None,
    ) -> None:
        self._categories = categories or SERVICE_CATEGORIES
        self._masters = masters or MASTERS

    def categories(self) -> list[ServiceCategory]:
        return list(self._categories)

    def masters(self) -> list[Master]:
        return list(self._masters)

    def time_slots(self) -> dict[str, list[str]]:
        return {part: list(labels) for part, labels in TIME_SLOTS.items()}

    def find_service(self, service_id: uuid.UUID) -> ServiceItem | None:
        for category in self._categories:
            for service in category.services:
                if service.id == service_id:
                    return service
        return None

    def find_master(self, master_id: uuid.UUID) -> Master | None:
        return next((m for m in self._masters if m.id == master_id), None)

    def sample_news_posts(self) -> list[Post]:
        return list(NEWS_POSTS)

    def sample_promo_posts(self) -> list[Post]:
        return list(PROMO_POSTS)

    def sample_review_posts(self) -> list[Post]:
        return list(REVIEW_POSTS)

    def admin_services(self) -> list[AdminService]:
        return list(ADMIN_SERVICES)

    def admin_masters(self) -> list[AdminMaster]:
        return list(ADMIN_MASTERS)
