from __future__ import annotations

import hmac
import logging

from fastapi import Header, HTTPException

from studio_booking.core.config import settings

logger = logging.getLogger(__name__)


def bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        return ""
    return authorization[len("Bearer "):].strip()


def is_admin_token(token: str, expected: str) -> bool:
    if not token or not expected:
        return False
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


def require_admin(authorization: str | None = Header(None)) -> None:
    if not settings.ADMIN_TOKEN:
        logger.error("ADMIN_TOKEN is not configured; rejecting admin request")
    if not is_admin_token(bearer_token(authorization), settings.ADMIN_TOKEN):
        raise HTTPException(status_code=401, detail="unauthorized")
