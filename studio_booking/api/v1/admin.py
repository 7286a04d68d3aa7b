from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from studio_booking.api.security import require_admin
from studio_booking.api.v1.schemas import (
    AvailabilityDebugSchema,
    BookingListResponseSchema,
    BookingSchema,
    OkResponseSchema,
    TestEmailRequestSchema,
)
from studio_booking.application.exceptions import BookingValidationError, CalendarUpstreamError
from studio_booking.application.ports.notifier import NotifierPort
from studio_booking.application.use_cases.availability import AvailabilityUseCase
from studio_booking.application.use_cases.booking import BookingUseCase
from studio_booking.application.utils.email_templates import smtp_test
from studio_booking.core.config import settings
from studio_booking.wiring.dependencies import (
    get_availability_use_case,
    get_booking_use_case,
    get_notifier,
    get_timezone,
)

router = APIRouter(dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


@router.get("/bookings", response_model=BookingListResponseSchema)
def list_bookings(
    include_all: str | None = Query(None, alias="all"),
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        records = uc.list_bookings(include_all=include_all == "1")
    except CalendarUpstreamError as e:
        logger.error("Listing bookings failed", extra={"status": e.status, "error": e.detail})
        raise HTTPException(status_code=502, detail="failed to list events")
    return BookingListResponseSchema(events=[BookingSchema.from_record(r) for r in records])


@router.post("/bookings/{event_id}/cancel", response_model=OkResponseSchema)
def cancel_booking(event_id: str, uc: BookingUseCase = Depends(get_booking_use_case)):
    try:
        uc.cancel_booking(event_id)
    except BookingValidationError as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except CalendarUpstreamError as e:
        logger.error("Cancel failed", extra={"event_id": event_id, "status": e.status, "error": e.detail})
        raise HTTPException(status_code=502, detail="cancel failed")
    return OkResponseSchema()


@router.post("/bookings/{event_id}/complete", response_model=OkResponseSchema)
def complete_booking(event_id: str, uc: BookingUseCase = Depends(get_booking_use_case)):
    try:
        uc.complete_booking(event_id)
    except BookingValidationError as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except CalendarUpstreamError as e:
        logger.error("Complete failed", extra={"event_id": event_id, "status": e.status, "error": e.detail})
        raise HTTPException(status_code=502, detail="complete failed")
    return OkResponseSchema()


@router.get("/availability", response_model=AvailabilityDebugSchema)
def availability_debug(
    date: str | None = Query(None),
    service: str | None = Query(None),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        report = uc.explain(date, service)
    except BookingValidationError as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except CalendarUpstreamError as e:
        logger.error("Availability debug failed", extra={"status": e.status, "error": e.detail, "date": date})
        raise HTTPException(status_code=502, detail="availability failed")
    return AvailabilityDebugSchema.from_report(report, get_timezone())


@router.post("/test-email", response_model=OkResponseSchema)
def test_email(req: TestEmailRequestSchema | None = None, notifier: NotifierPort = Depends(get_notifier)):
    to = (req.to if req else None) or settings.owner_email
    if not to:
        raise HTTPException(status_code=400, detail="no recipient configured")
    try:
        notifier.notify(to, *smtp_test(settings.BUSINESS_NAME))
    except Exception as e:
        logger.exception("SMTP test failed", extra={"to": to, "error": str(e)})
        raise HTTPException(status_code=502, detail=f"email failed: {e}")
    return OkResponseSchema()
