from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class LocationKind(str, Enum):
    studio = "studio"
    mobile = "mobile"


@dataclass(frozen=True)
class BookingRequest:
    start: datetime
    service_name: str
    client_email: str
    client_name: str | None = None
    location: LocationKind = LocationKind.studio
    address: str | None = None


@dataclass(frozen=True)
class BookingRecord:
    event_id: str
    start: datetime | None
    end: datetime | None
    client_email: str | None
    service_name: str | None
    summary: str = ""
    description: str = ""
    client_name: str | None = None
    location: LocationKind = LocationKind.studio
    address: str | None = None
    travel_fee: int = 0
    completed: bool = False
    thank_you_sent: bool = False
    source: str | None = None
    private: dict[str, str] = field(default_factory=dict)
