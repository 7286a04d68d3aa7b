from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from studio_booking.domain.entities.interval import Interval


class BusySourcePort(ABC):
    @abstractmethod
    def busy_intervals(self, day_start: datetime, day_end: datetime, window: Interval) -> list[Interval]:
        """Busy spans for the civil day, clamped to the business window."""
        raise NotImplementedError
