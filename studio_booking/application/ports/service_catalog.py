from __future__ import annotations

from abc import ABC, abstractmethod

from studio_booking.domain.entities.service_spec import ServiceSpec


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_spec(self, service_name: str) -> ServiceSpec:
        """Duration and buffers for a service. Unknown names get the fallback duration."""
        raise NotImplementedError

    @abstractmethod
    def is_known(self, service_name: str) -> bool:
        raise NotImplementedError
