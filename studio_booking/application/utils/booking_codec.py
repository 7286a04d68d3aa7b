"""Booking record <-> calendar event translation.

The event's private extended properties are the machine-readable record;
summary and description repeat the same data for humans reading the
calendar directly. All private values are strings, booleans included.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Callable
from zoneinfo import ZoneInfo

from studio_booking.application.ports.calendar import CalendarEvent
from studio_booking.domain.entities.booking import BookingRecord, BookingRequest, LocationKind

KEY_SOURCE = "source"
KEY_EMAIL = "email"
KEY_SERVICE = "service"
KEY_LOCATION = "location"
KEY_ADDRESS = "address"
KEY_TRAVEL_FEE = "travelFee"
KEY_COMPLETED = "completed"
KEY_THANK_YOU_SENT = "thankYouSent"

TRUE = "true"
FALSE = "false"

CONTACT_EMAIL_RE = re.compile(r"Contact:\s*([^\s]+@[^\s]+)", re.IGNORECASE)
CLIENT_LINE_RE = re.compile(r"^Client:\s*(.+)$", re.IGNORECASE | re.MULTILINE)
CONTACT_LINE_RE = re.compile(r"\b(?:Client|Contact):\s", re.IGNORECASE)


@dataclass(frozen=True)
class CodecConfig:
    business_name: str
    source_marker: str
    time_zone: ZoneInfo
    travel_fee: int = 15
    policy_text: str = "24h reschedule; late cancellations may be charged."


def private_props(event: CalendarEvent) -> dict[str, Any]:
    return dict(((event.get("extendedProperties") or {}).get("private")) or {})


def travel_fee_for(location: LocationKind, config: CodecConfig) -> int:
    return config.travel_fee if location is LocationKind.mobile else 0


# Classifier rules, evaluated in order. Any match marks a site booking.

def _has_source_marker(event: CalendarEvent, config: CodecConfig) -> bool:
    return private_props(event).get(KEY_SOURCE) == config.source_marker


def _has_private_email(event: CalendarEvent, config: CodecConfig) -> bool:
    return bool(private_props(event).get(KEY_EMAIL))


def _has_private_service(event: CalendarEvent, config: CodecConfig) -> bool:
    return isinstance(private_props(event).get(KEY_SERVICE), str)


def _has_brand_summary(event: CalendarEvent, config: CodecConfig) -> bool:
    pattern = rf"(?:—|-)\s*{re.escape(config.business_name)}"
    return re.search(pattern, event.get("summary") or "") is not None


def _has_contact_line(event: CalendarEvent, config: CodecConfig) -> bool:
    return CONTACT_LINE_RE.search(event.get("description") or "") is not None


SITE_BOOKING_RULES: list[tuple[str, Callable[[CalendarEvent, CodecConfig], bool]]] = [
    ("source_marker", _has_source_marker),
    ("private_email", _has_private_email),
    ("private_service", _has_private_service),
    ("brand_summary", _has_brand_summary),
    ("contact_line", _has_contact_line),
]


def matching_rule(event: CalendarEvent, config: CodecConfig) -> str | None:
    for name, rule in SITE_BOOKING_RULES:
        if rule(event, config):
            return name
    return None


def is_site_booking(event: CalendarEvent, config: CodecConfig) -> bool:
    return matching_rule(event, config) is not None


def extract_client_email(event: CalendarEvent) -> str | None:
    from_private = private_props(event).get(KEY_EMAIL)
    if from_private:
        return str(from_private)
    match = CONTACT_EMAIL_RE.search(event.get("description") or "")
    return match.group(1) if match else None


def build_summary(service_name: str, config: CodecConfig) -> str:
    return f"{service_name} — {config.business_name}"


def build_description(request: BookingRequest, config: CodecConfig) -> str:
    lines = [
        f"Client: {request.client_name or 'Guest'}",
        f"Service: {request.service_name}",
        f"Contact: {request.client_email}",
        f"Location: {request.location.value.capitalize()}",
    ]
    if request.location is LocationKind.mobile:
        lines.append(f"Address: {request.address}")
        lines.append(f"Travel fee: ${travel_fee_for(request.location, config)}")
    lines.append(f"Policy: {config.policy_text}")
    return "\n".join(lines)


def encode(request: BookingRequest, end: datetime, config: CodecConfig) -> CalendarEvent:
    zone_name = config.time_zone.key
    start_local = request.start.astimezone(config.time_zone)
    end_local = end.astimezone(config.time_zone)
    mobile = request.location is LocationKind.mobile
    return {
        "summary": build_summary(request.service_name, config),
        "description": build_description(request, config),
        "start": {"dateTime": start_local.isoformat(), "timeZone": zone_name},
        "end": {"dateTime": end_local.isoformat(), "timeZone": zone_name},
        "reminders": {"useDefault": True},
        "visibility": "private",
        "extendedProperties": {
            "private": {
                KEY_SOURCE: config.source_marker,
                KEY_EMAIL: request.client_email,
                KEY_SERVICE: request.service_name,
                KEY_LOCATION: request.location.value,
                KEY_ADDRESS: (request.address or "") if mobile else "",
                KEY_TRAVEL_FEE: str(travel_fee_for(request.location, config)),
                KEY_COMPLETED: FALSE,
                KEY_THANK_YOU_SENT: FALSE,
            }
        },
    }


def apply_completion(event: CalendarEvent) -> dict[str, Any]:
    """Private props with the completion flags set, other keys untouched."""
    return {**private_props(event), KEY_COMPLETED: TRUE, KEY_THANK_YOU_SENT: TRUE}


def _event_time(value: dict[str, Any] | None, zone: ZoneInfo) -> datetime | None:
    if not value:
        return None
    try:
        if value.get("dateTime"):
            moment = datetime.fromisoformat(str(value["dateTime"]).replace("Z", "+00:00"))
            if moment.tzinfo is None:
                return None
            return moment.astimezone(zone)
        if value.get("date"):
            return datetime.combine(date.fromisoformat(str(value["date"])), time(), tzinfo=zone)
    except ValueError:
        return None
    return None


def _service_from_summary(summary: str, config: CodecConfig) -> str | None:
    for separator in (" — ", " - "):
        head, found, tail = summary.rpartition(separator)
        if found and tail.strip() == config.business_name:
            return head.strip() or None
    return None


def decode(event: CalendarEvent, config: CodecConfig) -> BookingRecord:
    private = private_props(event)
    description = event.get("description") or ""
    summary = event.get("summary") or ""

    try:
        location = LocationKind(private.get(KEY_LOCATION) or LocationKind.studio.value)
    except ValueError:
        location = LocationKind.studio

    try:
        travel_fee = int(private.get(KEY_TRAVEL_FEE) or 0)
    except ValueError:
        travel_fee = 0

    client_match = CLIENT_LINE_RE.search(description)

    return BookingRecord(
        event_id=str(event.get("id") or ""),
        start=_event_time(event.get("start"), config.time_zone),
        end=_event_time(event.get("end"), config.time_zone),
        client_email=extract_client_email(event),
        service_name=private.get(KEY_SERVICE) or _service_from_summary(summary, config),
        summary=summary,
        description=description,
        client_name=client_match.group(1).strip() if client_match else None,
        location=location,
        address=private.get(KEY_ADDRESS) or None,
        travel_fee=travel_fee,
        completed=private.get(KEY_COMPLETED) == TRUE,
        thank_you_sent=private.get(KEY_THANK_YOU_SENT) == TRUE,
        source=private.get(KEY_SOURCE),
        private={str(k): str(v) for k, v in private.items()},
    )
