from __future__ import annotations

import copy
import logging
import uuid
from datetime import date, datetime, time, timezone
from typing import Any
from zoneinfo import ZoneInfo

from studio_booking.application.exceptions import CalendarEventNotFound
from studio_booking.application.ports.calendar import CalendarEvent, CalendarPort
from studio_booking.application.utils.intervals import clamp, merge
from studio_booking.application.utils.timezone_anchor import from_millis, parse_instant, to_millis
from studio_booking.domain.entities.interval import Interval


def _deep_merge(target: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
    return target


class MemoryCalendar(CalendarPort):
    """Process-local calendar used in dev mode and tests."""

    def __init__(self, time_zone: str = "UTC", events: list[CalendarEvent] | None = None) -> None:
        self._zone = ZoneInfo(time_zone)
        self._events: dict[str, CalendarEvent] = {}
        self._logger = logging.getLogger(__name__)
        for event in events or []:
            self.insert_event(event)

    def _span(self, event: CalendarEvent) -> Interval | None:
        start = event.get("start") or {}
        end = event.get("end") or {}
        try:
            if start.get("date") and end.get("date"):
                return Interval(
                    to_millis(datetime.combine(date.fromisoformat(start["date"]), time(), tzinfo=self._zone)),
                    to_millis(datetime.combine(date.fromisoformat(end["date"]), time(), tzinfo=self._zone)),
                )
            return Interval(parse_instant(start["dateTime"]), parse_instant(end["dateTime"]))
        except (KeyError, TypeError, ValueError):
            return None

    def list_events(
        self,
        time_min: datetime,
        time_max: datetime,
        time_zone: str | None = None,
        max_results: int | None = None,
    ) -> list[CalendarEvent]:
        query = Interval(to_millis(time_min), to_millis(time_max))
        matched: list[tuple[int, CalendarEvent]] = []
        for event in self._events.values():
            span = self._span(event)
            if span is None:
                # unparseable events are returned as-is, like a real store would
                matched.append((query.start, copy.deepcopy(event)))
            elif span.overlaps(query):
                matched.append((span.start, copy.deepcopy(event)))
        matched.sort(key=lambda item: item[0])
        return [event for _, event in matched]

    def get_event(self, event_id: str) -> CalendarEvent:
        if event_id not in self._events:
            raise CalendarEventNotFound("Event not found", status=404, detail=event_id)
        return copy.deepcopy(self._events[event_id])

    def insert_event(self, fields: CalendarEvent) -> CalendarEvent:
        event = copy.deepcopy(fields)
        event["id"] = event.get("id") or uuid.uuid4().hex
        event.setdefault("status", "confirmed")
        self._events[event["id"]] = event
        self._logger.info("Memory calendar event created", extra={"event_id": event["id"]})
        return copy.deepcopy(event)

    def patch_event(self, event_id: str, fields: CalendarEvent) -> CalendarEvent:
        if event_id not in self._events:
            raise CalendarEventNotFound("Event not found", status=404, detail=event_id)
        _deep_merge(self._events[event_id], fields)
        return copy.deepcopy(self._events[event_id])

    def delete_event(self, event_id: str) -> None:
        if self._events.pop(event_id, None) is None:
            raise CalendarEventNotFound("Event not found", status=404, detail=event_id)
        self._logger.info("Memory calendar event deleted", extra={"event_id": event_id})

    def query_freebusy(self, time_min: datetime, time_max: datetime) -> list[dict[str, str]]:
        query = Interval(to_millis(time_min), to_millis(time_max))
        spans = []
        for event in self._events.values():
            if event.get("transparency") == "transparent":
                continue
            span = self._span(event)
            clamped = clamp(span, query) if span else None
            if clamped:
                spans.append(clamped)
        return [
            {
                "start": from_millis(span.start, timezone.utc).isoformat().replace("+00:00", "Z"),
                "end": from_millis(span.end, timezone.utc).isoformat().replace("+00:00", "Z"),
            }
            for span in merge(spans)
        ]
