from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime

from studio_booking.domain.entities.interval import Interval


@dataclass(frozen=True)
class OfferedSlot:
    start: datetime
    end: datetime
    label: str


@dataclass(frozen=True)
class AvailabilityReport:
    day: date
    service_name: str
    duration_minutes: int
    window: Interval | None
    busy: list[Interval] = field(default_factory=list)
    free: list[Interval] = field(default_factory=list)
    slots: list[OfferedSlot] = field(default_factory=list)
