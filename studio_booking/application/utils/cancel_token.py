from __future__ import annotations

import hashlib
import hmac

MS_PER_DAY = 86_400_000
CLOCK_SKEW_MS = 5 * 60_000


def _signature(event_id: str, issued_at: str, secret: str) -> str:
    message = f"{event_id}.{issued_at}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def issue_cancel_token(event_id: str, secret: str, now_ms: int) -> str:
    if not secret:
        raise ValueError("Cancel token secret is not configured")
    if not event_id or "." in event_id:
        raise ValueError(f"Event id cannot be tokenized: {event_id!r}")
    issued_at = str(now_ms)
    return f"{event_id}.{issued_at}.{_signature(event_id, issued_at, secret)}"


def verify_cancel_token(token: str | None, secret: str | None, max_age_days: int, now_ms: int) -> str | None:
    """Event id bound by a valid token, else None. Forged and expired look the same."""
    if not token or not secret:
        return None

    parts = token.split(".")
    if len(parts) != 3:
        return None
    event_id, issued_raw, signature = parts
    if not event_id or not issued_raw.isascii() or not issued_raw.isdigit():
        return None

    expected = _signature(event_id, issued_raw, secret)
    if not hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8")):
        return None

    issued_at = int(issued_raw)
    if now_ms - issued_at > max_age_days * MS_PER_DAY:
        return None
    if issued_at - now_ms > CLOCK_SKEW_MS:
        return None
    return event_id
