import logging

from fastapi import FastAPI

from studio_booking.api.v1.admin import router as admin_router
from studio_booking.api.v1.availability import router as availability_router
from studio_booking.api.v1.bookings import router as bookings_router
from studio_booking.core.config import settings


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("event_id", "service", "date", "to", "status", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title=f"{settings.BUSINESS_NAME} Booking", version="1.0.0")

app.include_router(availability_router, prefix="/api/v1", tags=["availability"])
app.include_router(bookings_router, prefix="/api/v1", tags=["bookings"])
app.include_router(admin_router, prefix="/api/v1/admin", tags=["admin"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
