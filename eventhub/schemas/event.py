"""Event schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import EmailStr, Field, field_validator, model_validator

from eventhub.models.event import EventStatus
from eventhub.schemas.common import BaseSchema, to_naive_utc


class EventCreate(BaseSchema):
    """Schema for creating an event."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    category_id: int | None = None
    venue: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    starts_at: datetime
    ends_at: datetime
    organizer_name: str = Field(..., min_length=1, max_length=100)
    organizer_email: EmailStr
    organizer_phone: str = Field(..., min_length=1, max_length=30)
    capacity: int = Field(..., gt=0)
    ticket_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)

    @field_validator("starts_at", "ends_at")
    @classmethod
    def normalize_timezone(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_time_window(self) -> "EventCreate":
        if self.starts_at >= self.ends_at:
            raise ValueError("Event start time must be before its end time")
        return self


class EventUpdate(BaseSchema):
    """Schema for updating an event. The time window is re-checked by the service."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    category_id: int | None = None
    venue: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=100)
    country: str | None = Field(None, min_length=1, max_length=100)
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    organizer_name: str | None = Field(None, min_length=1, max_length=100)
    organizer_email: EmailStr | None = None
    organizer_phone: str | None = Field(None, min_length=1, max_length=30)
    capacity: int | None = Field(None, gt=0)
    ticket_price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    status: EventStatus | None = None

    @field_validator("starts_at", "ends_at")
    @classmethod
    def normalize_timezone(cls, value: datetime | None) -> datetime | None:
        return to_naive_utc(value)


class EventResponse(BaseSchema):
    """Schema for event response."""

    event_id: int
    title: str
    description: str
    category_id: int | None
    venue: str
    city: str
    country: str
    starts_at: datetime
    ends_at: datetime
    organizer_name: str
    organizer_email: str
    organizer_phone: str
    capacity: int
    ticket_price: Decimal
    status: EventStatus
    average_rating: float
    total_reviews: int
    created_at: datetime
    updated_at: datetime


class AvailabilityResponse(BaseSchema):
    """Remaining capacity derived from the paid tickets of an event."""

    event_id: int
    capacity: int
    sold: int
    available: int
    is_available: bool


class EventDetailResponse(EventResponse):
    """Event with its category name and current availability."""

    category_name: str | None = None
    availability: AvailabilityResponse


class TicketsSoldResponse(BaseSchema):
    event_id: int
    total_tickets_sold: int
    total_revenue: Decimal
