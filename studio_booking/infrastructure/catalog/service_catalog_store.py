from __future__ import annotations

from typing import Mapping

from studio_booking.application.ports.service_catalog import ServiceCatalogPort
from studio_booking.domain.entities.service_spec import ServiceSpec


class ServiceCatalogStore(ServiceCatalogPort):
    def __init__(
        self,
        durations: Mapping[str, int],
        default_minutes: int = 60,
        pre_buffer_minutes: int = 0,
        post_buffer_minutes: int = 0,
    ) -> None:
        self._durations = {name.strip().lower(): (name, minutes) for name, minutes in durations.items()}
        self._default_minutes = default_minutes
        self._pre = pre_buffer_minutes
        self._post = post_buffer_minutes

    def get_spec(self, service_name: str) -> ServiceSpec:
        name = service_name.strip()
        entry = self._durations.get(name.lower())
        if entry:
            name, minutes = entry
        else:
            minutes = self._default_minutes
        return ServiceSpec(
            name=name,
            duration_minutes=minutes,
            pre_buffer_minutes=self._pre,
            post_buffer_minutes=self._post,
        )

    def is_known(self, service_name: str) -> bool:
        return service_name.strip().lower() in self._durations
