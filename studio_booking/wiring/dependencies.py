from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from fastapi import BackgroundTasks, Depends

from studio_booking.application.ports.busy_source import BusySourcePort
from studio_booking.application.ports.calendar import CalendarPort
from studio_booking.application.ports.notifier import NotifierPort
from studio_booking.application.ports.service_catalog import ServiceCatalogPort
from studio_booking.application.use_cases.availability import AvailabilityUseCase
from studio_booking.application.use_cases.booking import BookingUseCase
from studio_booking.application.use_cases.notifications import NotificationDispatcher
from studio_booking.application.utils.booking_codec import CodecConfig
from studio_booking.application.utils.slot_generator import SlotMode, SlotPolicy
from studio_booking.core.config import settings
from studio_booking.domain.entities.business_hours import BusinessCalendar
from studio_booking.infrastructure.calendar.busy_sources import EventEnumerationBusySource, FreeBusyBusySource
from studio_booking.infrastructure.calendar.google_calendar import GoogleCalendar, ServiceAccountToken
from studio_booking.infrastructure.calendar.memory_calendar import MemoryCalendar
from studio_booking.infrastructure.catalog.service_catalog_store import ServiceCatalogStore
from studio_booking.infrastructure.notifier.log_notifier import LogNotifier
from studio_booking.infrastructure.notifier.smtp_notifier import SmtpNotifier

logger = logging.getLogger(__name__)


@lru_cache
def get_timezone() -> ZoneInfo:
    return ZoneInfo(settings.BUSINESS_TIMEZONE)


@lru_cache
def get_business_calendar() -> BusinessCalendar:
    return BusinessCalendar.from_minutes(settings.BUSINESS_HOURS)


@lru_cache
def get_slot_policy() -> SlotPolicy:
    return SlotPolicy(mode=SlotMode(settings.SLOT_MODE.lower()), step_minutes=settings.SLOT_STEP_MINUTES)


@lru_cache
def get_codec_config() -> CodecConfig:
    return CodecConfig(
        business_name=settings.BUSINESS_NAME,
        source_marker=settings.BOOKING_SOURCE_MARKER,
        time_zone=get_timezone(),
        travel_fee=settings.TRAVEL_FEE,
        policy_text=settings.BOOKING_POLICY_TEXT,
    )


@lru_cache
def get_catalog() -> ServiceCatalogPort:
    return ServiceCatalogStore(
        durations=settings.SERVICE_DURATIONS,
        default_minutes=settings.DEFAULT_SERVICE_MINUTES,
        pre_buffer_minutes=settings.PRE_BUFFER_MINUTES,
        post_buffer_minutes=settings.POST_BUFFER_MINUTES,
    )


@lru_cache
def get_calendar() -> CalendarPort:
    if settings.GOOGLE_CALENDAR_ID and settings.GOOGLE_CLIENT_EMAIL and settings.GOOGLE_PRIVATE_KEY:
        logger.info("Using Google Calendar")
        return GoogleCalendar(
            calendar_id=settings.GOOGLE_CALENDAR_ID,
            token_provider=ServiceAccountToken.from_key(settings.GOOGLE_CLIENT_EMAIL, settings.GOOGLE_PRIVATE_KEY),
            base_url=settings.GOOGLE_CALENDAR_BASE_URL,
        )
    if settings.ENV.lower() in {"dev", "local"}:
        logger.info("Using MemoryCalendar (Google credentials missing, ENV=dev/local)")
        return MemoryCalendar(time_zone=settings.BUSINESS_TIMEZONE)
    raise ValueError("GOOGLE_CALENDAR_ID, GOOGLE_CLIENT_EMAIL and GOOGLE_PRIVATE_KEY are required.")


@lru_cache
def get_notifier() -> NotifierPort:
    if not settings.SMTP_HOST:
        logger.info("Using LogNotifier (SMTP_HOST missing)")
        return LogNotifier()
    return SmtpNotifier(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER,
        password=settings.SMTP_PASS,
        from_address=settings.sender_email,
        use_ssl=settings.SMTP_USE_SSL,
    )


def get_busy_source(calendar: CalendarPort = Depends(get_calendar)) -> BusySourcePort:
    if settings.BUSY_SOURCE.lower() == "freebusy":
        return FreeBusyBusySource(calendar)
    return EventEnumerationBusySource(calendar, time_zone=settings.BUSINESS_TIMEZONE)


def get_availability_use_case(busy_source: BusySourcePort = Depends(get_busy_source)) -> AvailabilityUseCase:
    return AvailabilityUseCase(
        business_calendar=get_business_calendar(),
        catalog=get_catalog(),
        busy_source=busy_source,
        policy=get_slot_policy(),
        timezone=get_timezone(),
    )


def get_notification_dispatcher(
    background_tasks: BackgroundTasks,
    notifier: NotifierPort = Depends(get_notifier),
) -> NotificationDispatcher:
    return NotificationDispatcher(notifier, schedule=background_tasks.add_task)


def get_booking_use_case(
    calendar: CalendarPort = Depends(get_calendar),
    availability: AvailabilityUseCase = Depends(get_availability_use_case),
    notifications: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> BookingUseCase:
    return BookingUseCase(
        calendar=calendar,
        availability=availability,
        catalog=get_catalog(),
        codec=get_codec_config(),
        notifications=notifications,
        owner_email=settings.owner_email,
        cancel_secret=settings.CANCEL_TOKEN_SECRET or None,
        cancel_max_age_days=settings.CANCEL_TOKEN_MAX_AGE_DAYS,
        public_base_url=settings.PUBLIC_BASE_URL or None,
        lookahead_days=settings.ADMIN_LOOKAHEAD_DAYS,
    )
