from __future__ import annotations

from studio_booking.domain.entities.booking import BookingRecord, LocationKind

Email = tuple[str, str]


def booking_confirmation(record: BookingRecord, when: str, business_name: str, policy_text: str, cancel_url: str | None) -> Email:
    lines = [
        f"Hello {record.client_name or 'there'},",
        "",
        f"Your appointment is confirmed: {record.service_name} on {when}.",
    ]
    if record.location is LocationKind.mobile:
        lines.append(f"We will come to you at {record.address} (travel fee ${record.travel_fee}).")
    else:
        lines.append("The session takes place at the studio.")
    lines += ["", f"Policy: {policy_text}"]
    if cancel_url:
        lines += ["", f"Need to cancel? Use this link: {cancel_url}"]
    lines += ["", f"— {business_name}"]
    return f"Your booking is confirmed — {business_name}", "\n".join(lines)


def booking_owner_notice(record: BookingRecord, when: str, time_zone: str, business_name: str) -> Email:
    body = (
        "A new booking was made.\n\n"
        f"Service: {record.service_name}\n"
        f"When: {when} ({time_zone})\n"
        f"Client: {record.client_name or 'Guest'}\n"
        f"Client email: {record.client_email or 'n/a'}\n"
        f"Location: {record.location.value}\n"
        + (f"Address: {record.address}\nTravel fee: ${record.travel_fee}\n" if record.location is LocationKind.mobile else "")
        + f"Event ID: {record.event_id}\n"
    )
    return f"New booking — {business_name}", body


def cancellation_to_client(service: str, when: str, business_name: str, by_client: bool) -> Email:
    if by_client:
        detail = f"Your appointment ({service}) on {when} has been canceled as requested.\n"
    else:
        detail = (
            f"Your appointment ({service}) on {when} was canceled by {business_name}.\n"
            "If this is unexpected, please reply to reschedule.\n"
        )
    return f"Your appointment was canceled — {business_name}", f"Hello,\n\n{detail}\n— {business_name}"


def cancellation_owner_notice(service: str, when: str, time_zone: str, client_email: str | None, event_id: str, business_name: str, by_client: bool) -> Email:
    body = (
        f"A booking was canceled{' by the client' if by_client else ''}.\n\n"
        f"Service: {service}\n"
        f"When: {when} ({time_zone})\n"
        f"Client email: {client_email or 'n/a'}\n"
        f"Event ID: {event_id}\n"
    )
    return f"Booking canceled — {business_name}", body


def thank_you(service: str, business_name: str) -> Email:
    body = (
        "Hello,\n\n"
        f'Thank you for choosing {business_name} for your "{service}".\n'
        "We hope you're feeling relaxed and renewed.\n\n"
        "If you'd like to book your next session, just reply to this email or visit our site.\n\n"
        f"— {business_name}"
    )
    return f"Thank you — {business_name}", body


def completion_owner_notice(service: str, when: str, time_zone: str, client_email: str | None, event_id: str, business_name: str) -> Email:
    body = (
        "A booking was marked completed.\n\n"
        f"Service: {service}\n"
        f"When: {when} ({time_zone})\n"
        f"Client email: {client_email or 'n/a'}\n"
        f"Event ID: {event_id}\n"
    )
    return f"Marked completed — {business_name}", body


def smtp_test(business_name: str) -> Email:
    return f"{business_name} — SMTP test", "If you can read this, outbound e-mail is working."
