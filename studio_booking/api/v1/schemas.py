from __future__ import annotations

import datetime as dt
from datetime import datetime

from pydantic import BaseModel, Field

from studio_booking.domain.entities.availability import AvailabilityReport, OfferedSlot
from studio_booking.domain.entities.booking import BookingRecord
from studio_booking.domain.entities.interval import Interval


class SlotSchema(BaseModel):
    start: datetime
    end: datetime
    label: str

    @classmethod
    def from_slot(cls, slot: OfferedSlot) -> SlotSchema:
        return cls(start=slot.start, end=slot.end, label=slot.label)


class AvailabilityResponseSchema(BaseModel):
    date: dt.date
    service: str
    duration_minutes: int
    slots: list[SlotSchema] = Field(default_factory=list)


class IntervalSchema(BaseModel):
    start: datetime
    end: datetime


class AvailabilityDebugSchema(AvailabilityResponseSchema):
    window: IntervalSchema | None = None
    busy: list[IntervalSchema] = Field(default_factory=list)
    free: list[IntervalSchema] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: AvailabilityReport, tz) -> AvailabilityDebugSchema:
        def to_schema(interval: Interval) -> IntervalSchema:
            start, end = interval.as_datetimes(tz)
            return IntervalSchema(start=start, end=end)

        return cls(
            date=report.day,
            service=report.service_name,
            duration_minutes=report.duration_minutes,
            slots=[SlotSchema.from_slot(s) for s in report.slots],
            window=to_schema(report.window) if report.window else None,
            busy=[to_schema(i) for i in report.busy],
            free=[to_schema(i) for i in report.free],
        )


class CreateBookingRequestSchema(BaseModel):
    start: str | None = None
    service: str | None = None
    email: str | None = None
    name: str | None = None
    location: str | None = None
    address: str | None = None


class BookingSchema(BaseModel):
    id: str
    summary: str = ""
    start: datetime | None = None
    end: datetime | None = None
    service: str | None = None
    client_name: str | None = None
    client_email: str | None = None
    location: str = "studio"
    address: str | None = None
    travel_fee: int = 0
    completed: bool = False
    description: str = ""

    @classmethod
    def from_record(cls, record: BookingRecord) -> BookingSchema:
        return cls(
            id=record.event_id,
            summary=record.summary,
            start=record.start,
            end=record.end,
            service=record.service_name,
            client_name=record.client_name,
            client_email=record.client_email,
            location=record.location.value,
            address=record.address,
            travel_fee=record.travel_fee,
            completed=record.completed,
            description=record.description,
        )


class CreateBookingResponseSchema(BaseModel):
    ok: bool = True
    id: str
    booking: BookingSchema
    cancel_url: str | None = None


class CancelWithTokenRequestSchema(BaseModel):
    token: str | None = None


class OkResponseSchema(BaseModel):
    ok: bool = True


class BookingListResponseSchema(BaseModel):
    ok: bool = True
    events: list[BookingSchema] = Field(default_factory=list)


class TestEmailRequestSchema(BaseModel):
    to: str | None = None
