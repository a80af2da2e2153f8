"""Events API endpoints."""

from datetime import datetime

from fastapi import APIRouter, Query, status

from eventhub.api.v1.dependencies import (
    AdminUser,
    AvailabilityServiceDep,
    EventServiceDep,
    ReportServiceDep,
)
from eventhub.models.event import EventStatus
from eventhub.schemas.common import PaginatedResponse, to_naive_utc
from eventhub.schemas.event import (
    AvailabilityResponse,
    EventCreate,
    EventDetailResponse,
    EventResponse,
    EventUpdate,
    TicketsSoldResponse,
)

router = APIRouter()


@router.post(
    "",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new event",
)
async def create_event(
    event_data: EventCreate,
    admin: AdminUser,
    event_service: EventServiceDep,
) -> EventResponse:
    event = await event_service.create_event(event_data)
    return EventResponse.model_validate(event)


@router.get(
    "",
    response_model=PaginatedResponse[EventResponse],
    summary="List events",
)
async def list_events(
    event_service: EventServiceDep,
    status_filter: EventStatus | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[EventResponse]:
    """List events with optional filtering."""
    events, total = await event_service.get_events(
        status=status_filter,
        page=page,
        page_size=page_size,
    )

    return PaginatedResponse.of(
        [EventResponse.model_validate(e) for e in events],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get(
    "/upcoming",
    response_model=list[EventResponse],
    summary="List upcoming events",
)
async def list_upcoming_events(
    event_service: EventServiceDep,
    limit: int = Query(50, ge=1, le=100),
) -> list[EventResponse]:
    events = await event_service.get_upcoming_events(limit=limit)
    return [EventResponse.model_validate(e) for e in events]


@router.get(
    "/search",
    response_model=list[EventResponse],
    summary="Search events by category and location",
)
async def search_events(
    event_service: EventServiceDep,
    category: str | None = None,
    location: str | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
) -> list[EventResponse]:
    events = await event_service.search_events(
        category=category,
        location=location,
        page=page,
        page_size=page_size,
    )
    return [EventResponse.model_validate(e) for e in events]


@router.get(
    "/time-range",
    response_model=list[EventResponse],
    summary="List events starting within a time range",
)
async def list_events_in_range(
    event_service: EventServiceDep,
    start: datetime,
    end: datetime,
) -> list[EventResponse]:
    events = await event_service.get_events_in_range(
        to_naive_utc(start), to_naive_utc(end)
    )
    return [EventResponse.model_validate(e) for e in events]


@router.get(
    "/top/rated",
    response_model=list[EventResponse],
    summary="List top rated events",
)
async def list_top_rated(
    event_service: EventServiceDep,
    limit: int = Query(10, ge=1, le=100),
    min_reviews: int = Query(1, ge=0),
) -> list[EventResponse]:
    events = await event_service.get_top_rated(limit=limit, min_reviews=min_reviews)
    return [EventResponse.model_validate(e) for e in events]


@router.get(
    "/{event_id}",
    response_model=EventDetailResponse,
    summary="Get event details",
)
async def get_event(
    event_id: int,
    event_service: EventServiceDep,
    availability_service: AvailabilityServiceDep,
) -> EventDetailResponse:
    """Get event details with its category and current availability."""
    event = await event_service.get_event(event_id)
    availability = await availability_service.for_event(event)

    return EventDetailResponse(
        **EventResponse.model_validate(event).model_dump(),
        category_name=event.category.name if event.category else None,
        availability=AvailabilityResponse.model_validate(availability),
    )


@router.patch(
    "/{event_id}",
    response_model=EventResponse,
    summary="Update event",
)
async def update_event(
    event_id: int,
    event_data: EventUpdate,
    admin: AdminUser,
    event_service: EventServiceDep,
) -> EventResponse:
    event = await event_service.update_event(event_id, event_data)
    return EventResponse.model_validate(event)


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete event and its tickets",
)
async def delete_event(
    event_id: int,
    admin: AdminUser,
    event_service: EventServiceDep,
) -> None:
    await event_service.delete_event(event_id)


@router.get(
    "/{event_id}/availability",
    response_model=AvailabilityResponse,
    summary="Check ticket availability",
)
async def get_availability(
    event_id: int,
    availability_service: AvailabilityServiceDep,
) -> AvailabilityResponse:
    availability = await availability_service.get_availability(event_id)
    return AvailabilityResponse.model_validate(availability)


@router.get(
    "/{event_id}/tickets-sold",
    response_model=TicketsSoldResponse,
    summary="Count tickets sold",
)
async def get_tickets_sold(
    event_id: int,
    report_service: ReportServiceDep,
) -> TicketsSoldResponse:
    result = await report_service.get_tickets_sold(event_id)
    return TicketsSoldResponse(**result)
