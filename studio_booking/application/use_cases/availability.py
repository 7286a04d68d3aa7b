from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from studio_booking.application.exceptions import BookingValidationError
from studio_booking.application.ports.busy_source import BusySourcePort
from studio_booking.application.ports.service_catalog import ServiceCatalogPort
from studio_booking.application.utils.intervals import invert, merge
from studio_booking.application.utils.slot_generator import SlotPolicy, generate_starts
from studio_booking.application.utils.timezone_anchor import (
    MS_PER_MINUTE,
    DateLike,
    civil_to_millis,
    format_clock,
    from_millis,
    now_millis,
    to_civil_date,
    to_millis,
)
from studio_booking.domain.entities.availability import AvailabilityReport, OfferedSlot
from studio_booking.domain.entities.business_hours import MINUTES_PER_DAY, BusinessCalendar
from studio_booking.domain.entities.interval import Interval


class AvailabilityUseCase:
    def __init__(
        self,
        business_calendar: BusinessCalendar,
        catalog: ServiceCatalogPort,
        busy_source: BusySourcePort,
        policy: SlotPolicy,
        timezone: ZoneInfo,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self._business_calendar = business_calendar
        self._catalog = catalog
        self._busy_source = busy_source
        self._policy = policy
        self._timezone = timezone
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def compute_slots(self, day: DateLike | None, service_name: str | None) -> list[OfferedSlot]:
        return self.explain(day, service_name).slots

    def explain(self, day: DateLike | None, service_name: str | None) -> AvailabilityReport:
        if not day:
            raise BookingValidationError("date required")
        if not service_name or not service_name.strip():
            raise BookingValidationError("service required")
        try:
            civil_day = to_civil_date(day, self._timezone)
        except ValueError:
            raise BookingValidationError("invalid date")

        if not self._catalog.is_known(service_name):
            self._logger.info("Unknown service, using default duration", extra={"service": service_name.strip()})
        spec = self._catalog.get_spec(service_name.strip())
        hours = self._business_calendar.window_for(civil_day.weekday())
        empty = AvailabilityReport(
            day=civil_day,
            service_name=spec.name,
            duration_minutes=spec.duration_minutes,
            window=None,
        )
        if hours.is_closed:
            return empty

        try:
            window_start = civil_to_millis(civil_day, hours.open_minute, self._timezone)
            window_end = civil_to_millis(civil_day, hours.close_minute, self._timezone)
            # the whole civil day must be representable, not just the window
            day_start = from_millis(civil_to_millis(civil_day, 0, self._timezone), self._timezone)
            day_end = from_millis(civil_to_millis(civil_day, MINUTES_PER_DAY, self._timezone), self._timezone)
        except (ValueError, OverflowError):
            raise BookingValidationError("invalid date")
        if window_start >= window_end:
            return empty
        window = Interval(window_start, window_end)

        busy = merge(self._busy_source.busy_intervals(day_start, day_end, window))
        free = invert(busy, window)

        now = self._clock()
        starts = generate_starts(self._policy, free, window, spec, now, self._timezone)
        duration_ms = spec.duration_minutes * MS_PER_MINUTE
        slots = []
        for start_ms in starts:
            start = from_millis(start_ms, self._timezone)
            end = from_millis(start_ms + duration_ms, self._timezone)
            slots.append(OfferedSlot(start=start, end=end, label=format_clock(start, self._timezone)))

        self._logger.info(
            "Availability computed",
            extra={"date": civil_day.isoformat(), "service": spec.name, "reason": f"{len(slots)} slots"},
        )
        return AvailabilityReport(
            day=civil_day,
            service_name=spec.name,
            duration_minutes=spec.duration_minutes,
            window=window,
            busy=busy,
            free=free,
            slots=slots,
        )

    def offers(self, start: datetime, service_name: str) -> bool:
        """True when ``start`` is one of the slots currently offered for its day."""
        target = to_millis(start)
        return any(to_millis(slot.start) == target for slot in self.compute_slots(start, service_name))
