from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence
from zoneinfo import ZoneInfo

from studio_booking.application.utils.intervals import overlaps_any
from studio_booking.application.utils.timezone_anchor import MS_PER_MINUTE, align_to_next_whole_hour
from studio_booking.domain.entities.interval import Interval
from studio_booking.domain.entities.service_spec import ServiceSpec


class SlotMode(str, Enum):
    buffered = "buffered"
    hourly = "hourly"


@dataclass(frozen=True)
class SlotPolicy:
    mode: SlotMode = SlotMode.buffered
    step_minutes: int = 15

    def __post_init__(self) -> None:
        if self.step_minutes <= 0:
            raise ValueError("Slot step must be a positive number of minutes")


def buffered_starts(
    regions: Sequence[Interval],
    anchor: int,
    spec: ServiceSpec,
    step_minutes: int,
    now: int,
    busy: Iterable[Interval] = (),
) -> list[int]:
    """Appointment starts whose whole reserved span fits a region.

    Candidates ``t`` lie on a ``step_minutes`` grid anchored at ``anchor``
    (the business window opening). The reserved span is
    ``[t, t + pre + duration + post)`` and the offered start is ``t + pre``.
    ``busy`` only matters when the regions were not already carved from it.
    """
    step = step_minutes * MS_PER_MINUTE
    reserved = spec.reserved_minutes * MS_PER_MINUTE
    pre = spec.pre_buffer_minutes * MS_PER_MINUTE
    busy_list = list(busy)

    starts: list[int] = []
    for region in regions:
        lower = max(region.start, now, anchor)
        t = anchor + -(-(lower - anchor) // step) * step
        while t + reserved <= region.end:
            span = Interval(t, t + reserved)
            if t >= now and region.contains(span) and not overlaps_any(span, busy_list):
                starts.append(t + pre)
            t += step
    return starts


def hourly_starts(
    free: Sequence[Interval],
    spec: ServiceSpec,
    step_minutes: int,
    now: int,
    zone: ZoneInfo,
) -> list[int]:
    """Starts aligned to local whole hours, then every ``step_minutes``."""
    step = step_minutes * MS_PER_MINUTE
    duration = spec.duration_minutes * MS_PER_MINUTE
    pre = spec.pre_buffer_minutes * MS_PER_MINUTE
    post = spec.post_buffer_minutes * MS_PER_MINUTE

    starts: list[int] = []
    for window in free:
        t = align_to_next_whole_hour(max(window.start + pre, now), zone)
        while t + duration + post <= window.end:
            if t >= now and t - pre >= window.start:
                starts.append(t)
            t += step
    return starts


def generate_starts(
    policy: SlotPolicy,
    free: Sequence[Interval],
    window: Interval,
    spec: ServiceSpec,
    now: int,
    zone: ZoneInfo,
) -> list[int]:
    if policy.mode is SlotMode.hourly:
        return hourly_starts(free, spec, policy.step_minutes, now, zone)
    return buffered_starts(free, window.start, spec, policy.step_minutes, now)
