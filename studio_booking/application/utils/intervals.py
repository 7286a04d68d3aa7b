from __future__ import annotations

from typing import Iterable

from studio_booking.domain.entities.interval import Interval


def merge(intervals: Iterable[Interval]) -> list[Interval]:
    """Sorted, disjoint, minimal cover of the input; touching spans are joined."""
    merged: list[Interval] = []
    for current in sorted(intervals):
        if merged and current.start <= merged[-1].end:
            last = merged[-1]
            if current.end > last.end:
                merged[-1] = Interval(last.start, current.end)
            continue
        merged.append(current)
    return merged


def invert(merged: Iterable[Interval], window: Interval) -> list[Interval]:
    """Gaps of an already merged set inside ``window``."""
    free: list[Interval] = []
    cursor = window.start
    for busy in merged:
        if busy.end <= cursor:
            continue
        if busy.start >= window.end:
            break
        if cursor < busy.start:
            free.append(Interval(cursor, busy.start))
        cursor = max(cursor, busy.end)
    if cursor < window.end:
        free.append(Interval(cursor, window.end))
    return free


def clamp(interval: Interval, window: Interval) -> Interval | None:
    start = max(interval.start, window.start)
    end = min(interval.end, window.end)
    return Interval(start, end) if start < end else None


def overlaps_any(candidate: Interval, busy: Iterable[Interval]) -> bool:
    return any(candidate.overlaps(b) for b in busy)
