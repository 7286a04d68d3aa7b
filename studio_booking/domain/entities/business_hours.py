from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

MINUTES_PER_DAY = 24 * 60
WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True)
class BusinessWindow:
    open_minute: int
    close_minute: int

    @property
    def is_closed(self) -> bool:
        return self.open_minute >= self.close_minute


CLOSED = BusinessWindow(0, 0)


@dataclass(frozen=True)
class BusinessCalendar:
    """Weekday (0=Monday) to civil-time opening window in the business zone."""

    windows: Mapping[int, BusinessWindow] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for weekday, window in self.windows.items():
            if weekday not in range(7):
                raise ValueError(f"Weekday out of range: {weekday}")
            if not (0 <= window.open_minute <= MINUTES_PER_DAY and 0 <= window.close_minute <= MINUTES_PER_DAY):
                raise ValueError(f"Business window out of range for {WEEKDAY_NAMES[weekday]}: {window}")
        object.__setattr__(self, "windows", MappingProxyType(dict(self.windows)))

    def window_for(self, weekday: int) -> BusinessWindow:
        return self.windows.get(weekday, CLOSED)

    @classmethod
    def from_minutes(cls, table: Mapping[int | str, tuple[int, int] | list[int]]) -> BusinessCalendar:
        windows: dict[int, BusinessWindow] = {}
        for key, value in table.items():
            open_minute, close_minute = value
            windows[int(key)] = BusinessWindow(int(open_minute), int(close_minute))
        return cls(windows=windows)
