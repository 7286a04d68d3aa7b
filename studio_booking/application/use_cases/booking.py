from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable
from urllib.parse import urlencode
from zoneinfo import ZoneInfo

from studio_booking.application.exceptions import BookingValidationError, SlotUnavailableError, UnauthorizedError
from studio_booking.application.ports.calendar import CalendarPort
from studio_booking.application.ports.service_catalog import ServiceCatalogPort
from studio_booking.application.use_cases.availability import AvailabilityUseCase
from studio_booking.application.use_cases.notifications import NotificationDispatcher
from studio_booking.application.utils import email_templates
from studio_booking.application.utils.booking_codec import (
    CodecConfig,
    apply_completion,
    decode,
    encode,
    is_site_booking,
)
from studio_booking.application.utils.cancel_token import issue_cancel_token, verify_cancel_token
from studio_booking.application.utils.timezone_anchor import (
    MS_PER_MINUTE,
    format_local,
    from_millis,
    now_millis,
    to_millis,
)
from studio_booking.domain.entities.booking import BookingRecord, BookingRequest, LocationKind

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class BookingConfirmation:
    record: BookingRecord
    cancel_token: str | None
    cancel_url: str | None


def parse_booking_request(
    start: str | datetime | None,
    service: str | None,
    email: str | None,
    timezone: ZoneInfo,
    name: str | None = None,
    location: str | None = None,
    address: str | None = None,
) -> BookingRequest:
    """Validate raw booking fields. Runs before any calendar call."""
    if not start:
        raise BookingValidationError("start required")
    if not service or not service.strip():
        raise BookingValidationError("service required")
    if not email or not email.strip():
        raise BookingValidationError("email required")
    if not EMAIL_RE.match(email.strip()):
        raise BookingValidationError("invalid email")

    if isinstance(start, datetime):
        start_at = start
    else:
        try:
            start_at = datetime.fromisoformat(str(start).strip().replace("Z", "+00:00"))
        except ValueError:
            raise BookingValidationError("invalid start")
    if start_at.tzinfo is None:
        raise BookingValidationError("start must include a UTC offset")

    try:
        kind = LocationKind((location or LocationKind.studio.value).strip().lower())
    except ValueError:
        raise BookingValidationError("invalid location")

    cleaned_address = (address or "").strip()
    if kind is LocationKind.mobile and not cleaned_address:
        raise BookingValidationError("address required for mobile appointments")

    return BookingRequest(
        start=start_at.astimezone(timezone),
        service_name=service.strip(),
        client_email=email.strip(),
        client_name=(name or "").strip() or None,
        location=kind,
        address=cleaned_address if kind is LocationKind.mobile else None,
    )


class BookingUseCase:
    def __init__(
        self,
        calendar: CalendarPort,
        availability: AvailabilityUseCase,
        catalog: ServiceCatalogPort,
        codec: CodecConfig,
        notifications: NotificationDispatcher,
        owner_email: str | None = None,
        cancel_secret: str | None = None,
        cancel_max_age_days: int = 30,
        public_base_url: str | None = None,
        lookahead_days: int = 90,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self._calendar = calendar
        self._availability = availability
        self._catalog = catalog
        self._codec = codec
        self._notifications = notifications
        self._owner_email = owner_email
        self._cancel_secret = cancel_secret
        self._cancel_max_age_days = cancel_max_age_days
        self._public_base_url = (public_base_url or "").rstrip("/")
        self._lookahead_days = lookahead_days
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    @property
    def _zone(self) -> ZoneInfo:
        return self._codec.time_zone

    def create_booking(self, request: BookingRequest) -> BookingConfirmation:
        if not self._availability.offers(request.start, request.service_name):
            raise SlotUnavailableError("slot unavailable")

        spec = self._catalog.get_spec(request.service_name)
        end = from_millis(to_millis(request.start) + spec.duration_minutes * MS_PER_MINUTE, self._zone)
        event = self._calendar.insert_event(encode(request, end, self._codec))
        record = decode(event, self._codec)
        self._logger.info("Booking created", extra={"event_id": record.event_id, "service": record.service_name})

        token = self.issue_cancel_token(record.event_id)
        cancel_url = None
        if token and self._public_base_url:
            cancel_url = f"{self._public_base_url}/cancel?{urlencode({'token': token})}"

        when = self._when(record.start)
        self._notifications.dispatch(
            record.client_email,
            *email_templates.booking_confirmation(
                record, when, self._codec.business_name, self._codec.policy_text, cancel_url
            ),
        )
        self._notifications.dispatch(
            self._owner_email,
            *email_templates.booking_owner_notice(record, when, self._zone.key, self._codec.business_name),
        )
        return BookingConfirmation(record=record, cancel_token=token, cancel_url=cancel_url)

    def cancel_booking(self, event_id: str | None, by_client: bool = False) -> BookingRecord:
        if not event_id:
            raise BookingValidationError("missing id")

        record = decode(self._calendar.get_event(event_id), self._codec)
        self._calendar.delete_event(event_id)
        self._logger.info("Booking canceled", extra={"event_id": event_id, "reason": "client" if by_client else "admin"})

        service = record.service_name or record.summary or "Appointment"
        when = self._when(record.start)
        if record.client_email:
            self._notifications.dispatch(
                record.client_email,
                *email_templates.cancellation_to_client(service, when, self._codec.business_name, by_client),
            )
        else:
            self._logger.warning("No client email on canceled booking", extra={"event_id": event_id})
        self._notifications.dispatch(
            self._owner_email,
            *email_templates.cancellation_owner_notice(
                service, when, self._zone.key, record.client_email, event_id, self._codec.business_name, by_client
            ),
        )
        return record

    def cancel_with_token(self, token: str | None) -> BookingRecord:
        event_id = self.verify_cancel_token(token)
        if not event_id:
            raise UnauthorizedError("invalid token")
        return self.cancel_booking(event_id, by_client=True)

    def complete_booking(self, event_id: str | None) -> BookingRecord:
        if not event_id:
            raise BookingValidationError("missing id")

        event = self._calendar.get_event(event_id)
        before = decode(event, self._codec)
        patched = self._calendar.patch_event(
            event_id,
            {"extendedProperties": {"private": apply_completion(event)}},
        )
        record = decode(patched, self._codec)
        self._logger.info("Booking completed", extra={"event_id": event_id})

        service = before.service_name or before.summary or "Appointment"
        if before.client_email and not before.thank_you_sent:
            self._notifications.dispatch(
                before.client_email,
                *email_templates.thank_you(service, self._codec.business_name),
            )
        self._notifications.dispatch(
            self._owner_email,
            *email_templates.completion_owner_notice(
                service,
                self._when(before.start),
                self._zone.key,
                before.client_email,
                event_id,
                self._codec.business_name,
            ),
        )
        return record

    def list_bookings(self, include_all: bool = False) -> list[BookingRecord]:
        now = from_millis(self._clock(), self._zone)
        events = self._calendar.list_events(
            now,
            now + timedelta(days=self._lookahead_days),
            time_zone=self._zone.key,
            max_results=250,
        )
        selected = events if include_all else [e for e in events if is_site_booking(e, self._codec)]
        return [decode(e, self._codec) for e in selected]

    def issue_cancel_token(self, event_id: str) -> str | None:
        if not self._cancel_secret:
            return None
        try:
            return issue_cancel_token(event_id, self._cancel_secret, self._clock())
        except ValueError as e:
            self._logger.warning("Cancel link not issued", extra={"event_id": event_id, "error": str(e)})
            return None

    def verify_cancel_token(self, token: str | None) -> str | None:
        return verify_cancel_token(token, self._cancel_secret, self._cancel_max_age_days, self._clock())

    def _when(self, start: datetime | None) -> str:
        return format_local(start, self._zone) if start else "(date unknown)"
