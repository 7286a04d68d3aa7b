from __future__ import annotations

import logging
from datetime import datetime

from studio_booking.application.ports.busy_source import BusySourcePort
from studio_booking.application.ports.calendar import CalendarEvent, CalendarPort
from studio_booking.application.utils.intervals import clamp
from studio_booking.application.utils.timezone_anchor import parse_instant
from studio_booking.domain.entities.interval import Interval


def is_transparent(event: CalendarEvent) -> bool:
    return event.get("transparency") == "transparent"


def is_all_day(event: CalendarEvent) -> bool:
    start = event.get("start") or {}
    end = event.get("end") or {}
    return bool(start.get("date") and end.get("date"))


class EventEnumerationBusySource(BusySourcePort):
    """Lists every event of the day and classifies it."""

    def __init__(self, calendar: CalendarPort, time_zone: str, max_results: int = 2500) -> None:
        self._calendar = calendar
        self._time_zone = time_zone
        self._max_results = max_results
        self._logger = logging.getLogger(__name__)

    def busy_intervals(self, day_start: datetime, day_end: datetime, window: Interval) -> list[Interval]:
        events = self._calendar.list_events(
            day_start,
            day_end,
            time_zone=self._time_zone,
            max_results=self._max_results,
        )
        busy: list[Interval] = []
        for event in events:
            if is_transparent(event):
                continue
            if is_all_day(event):
                busy.append(window)
                continue
            try:
                span = Interval(
                    parse_instant((event.get("start") or {})["dateTime"]),
                    parse_instant((event.get("end") or {})["dateTime"]),
                )
            except (KeyError, TypeError, ValueError) as e:
                self._logger.warning(
                    "Skipping malformed calendar event",
                    extra={"event_id": event.get("id"), "error": str(e)},
                )
                continue
            clamped = clamp(span, window)
            if clamped:
                busy.append(clamped)
        return busy


class FreeBusyBusySource(BusySourcePort):
    """Asks the calendar for its pre-merged busy list over the business window."""

    def __init__(self, calendar: CalendarPort) -> None:
        self._calendar = calendar
        self._logger = logging.getLogger(__name__)

    def busy_intervals(self, day_start: datetime, day_end: datetime, window: Interval) -> list[Interval]:
        tz = day_start.tzinfo
        window_start, window_end = window.as_datetimes(tz)
        busy: list[Interval] = []
        for item in self._calendar.query_freebusy(window_start, window_end):
            try:
                span = Interval(parse_instant(item["start"]), parse_instant(item["end"]))
            except (KeyError, TypeError, ValueError) as e:
                self._logger.warning("Skipping malformed free/busy entry", extra={"error": str(e)})
                continue
            clamped = clamp(span, window)
            if clamped:
                busy.append(clamped)
        return busy
