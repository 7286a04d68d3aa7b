from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from studio_booking.api.v1.schemas import AvailabilityResponseSchema, SlotSchema
from studio_booking.application.exceptions import BookingValidationError, CalendarUpstreamError
from studio_booking.application.use_cases.availability import AvailabilityUseCase
from studio_booking.wiring.dependencies import get_availability_use_case

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/availability", response_model=AvailabilityResponseSchema)
def availability(
    date: str | None = Query(None),
    service: str | None = Query(None),
    uc: AvailabilityUseCase = Depends(get_availability_use_case),
):
    try:
        report = uc.explain(date, service)
    except BookingValidationError as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except CalendarUpstreamError as e:
        logger.error("Availability failed", extra={"status": e.status, "error": e.detail, "date": date})
        raise HTTPException(status_code=502, detail="availability failed")

    return AvailabilityResponseSchema(
        date=report.day,
        service=report.service_name,
        duration_minutes=report.duration_minutes,
        slots=[SlotSchema.from_slot(s) for s in report.slots],
    )
