"""Tests for creating, cancelling, completing and listing bookings."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import parse_qs, urlparse

import pytest

from studio_booking.application.exceptions import (
    BookingValidationError,
    CalendarEventNotFound,
    SlotUnavailableError,
    UnauthorizedError,
)
from studio_booking.application.ports.notifier import NotifierPort
from studio_booking.application.use_cases.booking import parse_booking_request
from studio_booking.domain.entities.booking import LocationKind

from conftest import EARLY_NOW, LA, SERVICE, make_booking_use_case, timed_event


class FailingNotifier(NotifierPort):
    def __init__(self) -> None:
        self.attempts = 0

    def notify(self, to: str, subject: str, body: str) -> None:
        self.attempts += 1
        raise ConnectionError("smtp down")


def studio_request(hour: int = 19, minute: int = 15, **overrides):
    fields = {
        "start": datetime(2026, 10, 26, hour, minute, tzinfo=LA).isoformat(),
        "service": SERVICE,
        "email": "ana@example.com",
        "timezone": LA,
        "name": "Ana",
    }
    fields.update(overrides)
    return parse_booking_request(**fields)


def all_events(calendar):
    return calendar.list_events(datetime(2026, 1, 1, tzinfo=LA), datetime(2027, 1, 1, tzinfo=LA))


def test_parse_booking_request_validation():
    cases = [
        ({"start": None}, "start required"),
        ({"service": " "}, "service required"),
        ({"email": None}, "email required"),
        ({"email": "not-an-email"}, "invalid email"),
        ({"start": "tomorrow"}, "invalid start"),
        ({"start": "2026-10-26T19:15:00"}, "start must include a UTC offset"),
        ({"location": "moon"}, "invalid location"),
        ({"location": "mobile", "address": "  "}, "address required for mobile appointments"),
    ]
    for overrides, reason in cases:
        with pytest.raises(BookingValidationError) as exc:
            studio_request(**overrides)
        assert exc.value.reason == reason


def test_parse_booking_request_normalises_fields():
    req = studio_request(start="2026-10-27T02:15:00Z", location="Mobile", address=" 12 Elm St ", name=" ")
    assert req.start == datetime(2026, 10, 26, 19, 15, tzinfo=LA)
    assert req.start.tzinfo == LA
    assert req.location is LocationKind.mobile
    assert req.address == "12 Elm St"
    assert req.client_name is None


def test_studio_address_is_dropped():
    assert studio_request(address="somewhere").address is None


def test_create_booking_writes_event_and_notifies(calendar, notifier):
    uc = make_booking_use_case(calendar, notifier)
    confirmation = uc.create_booking(studio_request())

    record = confirmation.record
    assert record.event_id
    assert record.start == datetime(2026, 10, 26, 19, 15, tzinfo=LA)
    assert record.end == datetime(2026, 10, 26, 20, 15, tzinfo=LA)
    assert record.client_email == "ana@example.com"
    assert record.completed is False

    stored = calendar.get_event(record.event_id)
    assert stored["extendedProperties"]["private"]["source"] == "booking-site"

    query = parse_qs(urlparse(confirmation.cancel_url).query)
    assert query["token"] == [confirmation.cancel_token]
    assert uc.verify_cancel_token(confirmation.cancel_token) == record.event_id

    recipients = [to for to, _, _ in notifier.sent]
    assert recipients == ["ana@example.com", "owner@example.com"]
    assert confirmation.cancel_url in notifier.sent[0][2]


def test_booked_slot_is_no_longer_offered(calendar, notifier):
    uc = make_booking_use_case(calendar, notifier)
    uc.create_booking(studio_request())
    with pytest.raises(SlotUnavailableError):
        uc.create_booking(studio_request(email="bo@example.com"))
    assert len(all_events(calendar)) == 1


def test_create_rejects_unoffered_start(calendar, notifier):
    uc = make_booking_use_case(calendar, notifier)
    calendar.insert_event(timed_event("2026-10-26T18:00:00-07:00", "2026-10-26T19:00:00-07:00"))
    for hour, minute in ((18, 30), (19, 20), (20, 0)):
        with pytest.raises(SlotUnavailableError):
            uc.create_booking(studio_request(hour, minute))
    assert len(all_events(calendar)) == 1
    assert notifier.sent == []


def test_create_without_secret_offers_no_cancel_link(calendar, notifier):
    uc = make_booking_use_case(calendar, notifier, cancel_secret=None)
    confirmation = uc.create_booking(studio_request())
    assert confirmation.cancel_token is None
    assert confirmation.cancel_url is None
    assert uc.verify_cancel_token("anything") is None


def test_notification_failure_does_not_fail_booking(calendar):
    failing = FailingNotifier()
    uc = make_booking_use_case(calendar, failing)
    confirmation = uc.create_booking(studio_request())
    assert calendar.get_event(confirmation.record.event_id)
    assert failing.attempts == 2


def test_mobile_booking_carries_travel_fee(calendar, notifier):
    uc = make_booking_use_case(calendar, notifier)
    record = uc.create_booking(studio_request(location="mobile", address="12 Elm St")).record
    assert record.location is LocationKind.mobile
    assert record.travel_fee == 15
    assert "12 Elm St" in notifier.sent[0][2]


def test_cancel_nonexistent_event_sends_nothing(calendar, notifier):
    uc = make_booking_use_case(calendar, notifier)
    with pytest.raises(CalendarEventNotFound):
        uc.cancel_booking("missing")
    assert notifier.sent == []


def test_cancel_requires_id(calendar, notifier):
    with pytest.raises(BookingValidationError):
        make_booking_use_case(calendar, notifier).cancel_booking("")


def test_admin_cancel_deletes_and_notifies(calendar, notifier):
    uc = make_booking_use_case(calendar, notifier)
    event_id = uc.create_booking(studio_request()).record.event_id
    notifier.sent.clear()

    uc.cancel_booking(event_id)

    assert all_events(calendar) == []
    assert [to for to, _, _ in notifier.sent] == ["ana@example.com", "owner@example.com"]
    assert "was canceled by Your Business" in notifier.sent[0][2]


def test_cancel_legacy_event_uses_description_email(calendar, notifier):
    legacy = calendar.insert_event(
        timed_event(
            "2026-10-26T18:00:00-07:00",
            "2026-10-26T19:00:00-07:00",
            summary="Massage — Your Business",
            description="Client: Old\nService: Massage\nContact: old@example.com",
        )
    )
    make_booking_use_case(calendar, notifier).cancel_booking(legacy["id"])
    assert notifier.sent[0][0] == "old@example.com"


def test_cancel_event_without_email_still_deletes(calendar, notifier):
    event = calendar.insert_event(timed_event("2026-10-26T18:00:00-07:00", "2026-10-26T19:00:00-07:00"))
    make_booking_use_case(calendar, notifier).cancel_booking(event["id"])
    assert all_events(calendar) == []
    assert [to for to, _, _ in notifier.sent] == ["owner@example.com"]


def test_cancel_with_token(calendar, notifier):
    uc = make_booking_use_case(calendar, notifier)
    confirmation = uc.create_booking(studio_request())
    notifier.sent.clear()

    uc.cancel_with_token(confirmation.cancel_token)

    assert all_events(calendar) == []
    assert "canceled as requested" in notifier.sent[0][2]


def test_cancel_with_bad_or_expired_token_touches_nothing(calendar, notifier):
    uc = make_booking_use_case(calendar, notifier)
    confirmation = uc.create_booking(studio_request())
    token = confirmation.cancel_token

    forged = token[:-1] + ("0" if token[-1] != "0" else "1")
    later = make_booking_use_case(calendar, notifier, now=EARLY_NOW + 31 * 86_400_000)
    for candidate_uc, candidate in ((uc, forged), (uc, None), (later, token)):
        with pytest.raises(UnauthorizedError):
            candidate_uc.cancel_with_token(candidate)
    assert len(all_events(calendar)) == 1


def test_complete_sets_flags_and_thanks_once(calendar, notifier):
    uc = make_booking_use_case(calendar, notifier)
    event_id = uc.create_booking(studio_request()).record.event_id
    calendar.patch_event(event_id, {"extendedProperties": {"private": {"note": "vip"}}})
    notifier.sent.clear()

    record = uc.complete_booking(event_id)

    assert record.completed is True
    assert record.thank_you_sent is True
    private = calendar.get_event(event_id)["extendedProperties"]["private"]
    assert private["note"] == "vip"
    assert private["email"] == "ana@example.com"
    assert [to for to, _, _ in notifier.sent] == ["ana@example.com", "owner@example.com"]
    assert notifier.sent[0][1] == "Thank you — Your Business"

    notifier.sent.clear()
    uc.complete_booking(event_id)
    assert [to for to, _, _ in notifier.sent] == ["owner@example.com"]


def test_complete_nonexistent_event(calendar, notifier):
    with pytest.raises(CalendarEventNotFound):
        make_booking_use_case(calendar, notifier).complete_booking("missing")
    assert notifier.sent == []


def test_list_bookings_filters_site_events(calendar, notifier):
    uc = make_booking_use_case(calendar, notifier)
    booked = uc.create_booking(studio_request()).record
    calendar.insert_event(timed_event("2026-10-27T09:00:00-07:00", "2026-10-27T10:00:00-07:00", summary="Dentist"))
    calendar.insert_event(
        timed_event(
            "2026-10-28T09:00:00-07:00",
            "2026-10-28T10:00:00-07:00",
            summary="Walk-in",
            description="Contact: walk@example.com",
        )
    )
    calendar.insert_event(timed_event("2027-06-01T09:00:00-07:00", "2027-06-01T10:00:00-07:00", summary="Too far — Your Business"))

    site = uc.list_bookings()
    assert site[0].event_id == booked.event_id
    assert [r.client_email for r in site] == ["ana@example.com", "walk@example.com"]
    assert len(uc.list_bookings(include_all=True)) == 3
