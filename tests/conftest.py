"""Shared builders for booking engine tests."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from studio_booking.application.use_cases.availability import AvailabilityUseCase
from studio_booking.application.use_cases.booking import BookingUseCase
from studio_booking.application.use_cases.notifications import NotificationDispatcher
from studio_booking.application.utils.booking_codec import CodecConfig
from studio_booking.application.utils.slot_generator import SlotPolicy
from studio_booking.application.utils.timezone_anchor import to_millis
from studio_booking.domain.entities.business_hours import BusinessCalendar
from studio_booking.infrastructure.calendar.busy_sources import EventEnumerationBusySource
from studio_booking.infrastructure.calendar.memory_calendar import MemoryCalendar
from studio_booking.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from studio_booking.infrastructure.notifier.log_notifier import LogNotifier

LA = ZoneInfo("America/Los_Angeles")
SERVICE = "Total Body Renewal (60 min)"
# Monday, Pacific Daylight Time (UTC-7)
MONDAY = "2026-10-26"
# the Tuesday before, so every slot on MONDAY lies in the future
EARLY_NOW = to_millis(datetime(2026, 10, 20, 9, 0, tzinfo=LA))
SECRET = "test-cancel-secret"


def local_ms(year: int, month: int, day: int, hour: int = 0, minute: int = 0, zone: ZoneInfo = LA) -> int:
    return to_millis(datetime(year, month, day, hour, minute, tzinfo=zone))


def timed_event(start: str, end: str, **extra) -> dict:
    return {"summary": "Busy", "start": {"dateTime": start}, "end": {"dateTime": end}, **extra}


def business_calendar() -> BusinessCalendar:
    return BusinessCalendar.from_minutes(
        {
            0: [17 * 60, 21 * 60],
            1: [17 * 60, 21 * 60],
            2: [17 * 60, 21 * 60],
            3: [17 * 60, 21 * 60],
            4: [17 * 60, 21 * 60],
            5: [9 * 60, 17 * 60],
            6: [0, 0],
        }
    )


def catalog() -> ServiceCatalogStore:
    return ServiceCatalogStore(
        durations={SERVICE: 60, "Radiance Facial Flow (45 min)": 45},
        default_minutes=60,
        pre_buffer_minutes=15,
        post_buffer_minutes=15,
    )


def codec_config() -> CodecConfig:
    return CodecConfig(business_name="Your Business", source_marker="booking-site", time_zone=LA)


def make_availability(calendar, now: int = EARLY_NOW, busy_source=None, policy: SlotPolicy | None = None) -> AvailabilityUseCase:
    return AvailabilityUseCase(
        business_calendar=business_calendar(),
        catalog=catalog(),
        busy_source=busy_source or EventEnumerationBusySource(calendar, time_zone=LA.key),
        policy=policy or SlotPolicy(step_minutes=15),
        timezone=LA,
        clock=lambda: now,
    )


def make_booking_use_case(calendar, notifier, now: int = EARLY_NOW, **kwargs) -> BookingUseCase:
    options = {
        "owner_email": "owner@example.com",
        "cancel_secret": SECRET,
        "public_base_url": "https://book.example.com",
    }
    options.update(kwargs)
    return BookingUseCase(
        calendar=calendar,
        availability=make_availability(calendar, now=now),
        catalog=catalog(),
        codec=codec_config(),
        notifications=NotificationDispatcher(notifier),
        clock=lambda: now,
        **options,
    )


@pytest.fixture
def calendar() -> MemoryCalendar:
    return MemoryCalendar(time_zone=LA.key)


@pytest.fixture
def notifier() -> LogNotifier:
    return LogNotifier()
