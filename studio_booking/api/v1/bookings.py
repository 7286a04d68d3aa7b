from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from studio_booking.api.v1.schemas import (
    BookingSchema,
    CancelWithTokenRequestSchema,
    CreateBookingRequestSchema,
    CreateBookingResponseSchema,
    OkResponseSchema,
)
from studio_booking.application.exceptions import (
    BookingValidationError,
    CalendarUpstreamError,
    SlotUnavailableError,
    UnauthorizedError,
)
from studio_booking.application.use_cases.booking import BookingUseCase, parse_booking_request
from studio_booking.wiring.dependencies import get_booking_use_case, get_timezone

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/bookings", response_model=CreateBookingResponseSchema)
def create_booking(
    req: CreateBookingRequestSchema,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        request = parse_booking_request(
            start=req.start,
            service=req.service,
            email=req.email,
            timezone=get_timezone(),
            name=req.name,
            location=req.location,
            address=req.address,
        )
        confirmation = uc.create_booking(request)
    except SlotUnavailableError as e:
        raise HTTPException(status_code=409, detail=e.reason)
    except BookingValidationError as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except CalendarUpstreamError as e:
        logger.error("Booking failed", extra={"status": e.status, "error": e.detail})
        raise HTTPException(status_code=502, detail="booking failed")

    return CreateBookingResponseSchema(
        id=confirmation.record.event_id,
        booking=BookingSchema.from_record(confirmation.record),
        cancel_url=confirmation.cancel_url,
    )


@router.post("/bookings/cancel", response_model=OkResponseSchema)
def cancel_with_token(
    req: CancelWithTokenRequestSchema,
    uc: BookingUseCase = Depends(get_booking_use_case),
):
    try:
        uc.cancel_with_token(req.token)
    except UnauthorizedError:
        raise HTTPException(status_code=401, detail="invalid token")
    except CalendarUpstreamError as e:
        logger.error("Self-cancel failed", extra={"status": e.status, "error": e.detail})
        raise HTTPException(status_code=502, detail="cancel failed")
    return OkResponseSchema()
