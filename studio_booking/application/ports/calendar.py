from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

CalendarEvent = dict[str, Any]


class CalendarPort(ABC):
    """Event store bound to one calendar id, shaped like Calendar v3 resources."""

    @abstractmethod
    def list_events(
        self,
        time_min: datetime,
        time_max: datetime,
        time_zone: str | None = None,
        max_results: int | None = None,
    ) -> list[CalendarEvent]:
        """Single (expanded) events overlapping [time_min, time_max), ordered by start."""
        raise NotImplementedError

    @abstractmethod
    def get_event(self, event_id: str) -> CalendarEvent:
        raise NotImplementedError

    @abstractmethod
    def insert_event(self, fields: CalendarEvent) -> CalendarEvent:
        """Create an event. The store assigns the id."""
        raise NotImplementedError

    @abstractmethod
    def patch_event(self, event_id: str, fields: CalendarEvent) -> CalendarEvent:
        raise NotImplementedError

    @abstractmethod
    def delete_event(self, event_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def query_freebusy(self, time_min: datetime, time_max: datetime) -> list[dict[str, str]]:
        """Merged busy spans as ``{"start": iso, "end": iso}`` within the range."""
        raise NotImplementedError
