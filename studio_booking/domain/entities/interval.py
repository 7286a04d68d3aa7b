from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo

from studio_booking.application.utils.timezone_anchor import from_millis


@dataclass(frozen=True, order=True)
class Interval:
    """Half-open span [start, end) of epoch milliseconds."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(f"Interval start must precede end: {self.start} >= {self.end}")

    def overlaps(self, other: Interval) -> bool:
        return not (self.end <= other.start or self.start >= other.end)

    def contains(self, other: Interval) -> bool:
        return self.start <= other.start and other.end <= self.end

    def as_datetimes(self, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
        zone = tz or timezone.utc
        return from_millis(self.start, zone), from_millis(self.end, zone)
