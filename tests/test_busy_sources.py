"""Tests for the enumeration and free/busy strategies."""

from __future__ import annotations

from studio_booking.application.utils.intervals import merge
from studio_booking.application.utils.timezone_anchor import from_millis
from studio_booking.domain.entities.interval import Interval
from studio_booking.infrastructure.calendar.busy_sources import EventEnumerationBusySource, FreeBusyBusySource
from studio_booking.infrastructure.calendar.memory_calendar import MemoryCalendar

from conftest import LA, local_ms, timed_event

WINDOW = Interval(local_ms(2026, 10, 26, 17), local_ms(2026, 10, 26, 21))
DAY_START = from_millis(local_ms(2026, 10, 26), LA)
DAY_END = from_millis(local_ms(2026, 10, 27), LA)


def enumerate_busy(calendar: MemoryCalendar) -> list[Interval]:
    return EventEnumerationBusySource(calendar, time_zone=LA.key).busy_intervals(DAY_START, DAY_END, WINDOW)


def test_timed_events_are_clamped_to_window():
    calendar = MemoryCalendar(LA.key)
    calendar.insert_event(timed_event("2026-10-26T16:00:00-07:00", "2026-10-26T17:30:00-07:00"))
    calendar.insert_event(timed_event("2026-10-26T09:00:00-07:00", "2026-10-26T10:00:00-07:00"))
    assert enumerate_busy(calendar) == [Interval(WINDOW.start, local_ms(2026, 10, 26, 17, 30))]


def test_transparent_events_do_not_block():
    calendar = MemoryCalendar(LA.key)
    calendar.insert_event(
        timed_event("2026-10-26T18:00:00-07:00", "2026-10-26T19:00:00-07:00", transparency="transparent")
    )
    calendar.insert_event({"summary": "Holiday", "start": {"date": "2026-10-26"}, "end": {"date": "2026-10-27"}, "transparency": "transparent"})
    assert enumerate_busy(calendar) == []


def test_all_day_event_blocks_whole_window():
    calendar = MemoryCalendar(LA.key)
    calendar.insert_event({"summary": "Away", "start": {"date": "2026-10-26"}, "end": {"date": "2026-10-27"}})
    assert enumerate_busy(calendar) == [WINDOW]


def test_malformed_events_are_skipped():
    calendar = MemoryCalendar(LA.key)
    calendar.insert_event(timed_event("not-a-time", "2026-10-26T19:00:00-07:00"))
    calendar.insert_event({"summary": "No times"})
    calendar.insert_event(timed_event("2026-10-26T18:00:00-07:00", "2026-10-26T19:00:00-07:00"))
    assert enumerate_busy(calendar) == [Interval(local_ms(2026, 10, 26, 18), local_ms(2026, 10, 26, 19))]


def test_both_strategies_agree():
    calendar = MemoryCalendar(LA.key)
    calendar.insert_event(timed_event("2026-10-26T17:30:00-07:00", "2026-10-26T18:15:00-07:00"))
    calendar.insert_event(timed_event("2026-10-27T01:00:00Z", "2026-10-27T02:00:00Z"))  # 18:00-19:00 local
    calendar.insert_event(timed_event("2026-10-26T20:30:00-07:00", "2026-10-26T23:00:00-07:00"))
    calendar.insert_event(
        timed_event("2026-10-26T19:00:00-07:00", "2026-10-26T20:00:00-07:00", transparency="transparent")
    )

    enumerated = merge(enumerate_busy(calendar))
    queried = merge(FreeBusyBusySource(calendar).busy_intervals(DAY_START, DAY_END, WINDOW))

    assert enumerated == queried == [
        Interval(local_ms(2026, 10, 26, 17, 30), local_ms(2026, 10, 26, 19)),
        Interval(local_ms(2026, 10, 26, 20, 30), WINDOW.end),
    ]
