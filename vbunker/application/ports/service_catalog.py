from __future__ import annotations

import uuid
from abc import ABC, abstractmethod

from vbunker.domain.entities.post import Post
from vbunker.domain.entities.service_catalog import AdminMaster, AdminService, Master, ServiceCategory, ServiceItem


class ServiceCatalogPort(ABC):
    @abstractmethod
    def categories(self) -> list[ServiceCategory]:
        """Service categories shown to the customer, in display order."""
        raise NotImplementedError

    @abstractmethod
    def masters(self) -> list[Master]:
        raise NotImplementedError

    @abstractmethod
    def time_slots(self) -> dict[str, list[str]]:
        """Bookable time labels grouped by part of day."""
        raise NotImplementedError

    @abstractmethod
    def find_service(self, service_id: uuid.UUID) -> ServiceItem | None:
        raise NotImplementedError

    @abstractmethod
    def find_master(self, master_id: uuid.UUID) -> Master | None:
        raise NotImplementedError

    @abstractmethod
    def sample_news_posts(self) -> list[Post]:
        raise NotImplementedError

    @abstractmethod
    def sample_promo_posts(self) -> list[Post]:
        raise NotImplementedError

    @abstractmethod
    def sample_review_posts(self) -> list[Post]:
        raise NotImplementedError

    @abstractmethod
    def admin_services(self) -> list[AdminService]:
        """Starting contents of the admin services screen."""
        raise NotImplementedError

    @abstractmethod
    def admin_masters(self) -> list[AdminMaster]:
        raise NotImplementedError
