"""Event service."""

import logging
from datetime import datetime

import redis.asyncio as redis
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from eventhub.distributed_lock import (
    DistributedLockError,
    distributed_lock,
    event_lock_key,
)
from eventhub.errors import (
    ConflictError,
    InvalidInputError,
    LockUnavailableError,
    NotFoundError,
)
from eventhub.models.base import utcnow
from eventhub.models.category import Category
from eventhub.models.event import Event, EventStatus
from eventhub.models.ticket import Ticket
from eventhub.schemas.event import EventCreate, EventUpdate
from eventhub.services.availability_service import AvailabilityService

logger = logging.getLogger(__name__)

# Only these fields may be cleared with an explicit null on update
NULLABLE_EVENT_FIELDS = frozenset({"category_id"})


class EventService:
    """Service for event catalog operations."""

    def __init__(self, db: AsyncSession, redis_client: redis.Redis | None = None):
        self.db = db
        self.redis = redis_client

    async def create_event(self, event_data: EventCreate) -> Event:
        """Create a new event."""
        await self._ensure_category(event_data.category_id)

        event = Event(
            **event_data.model_dump(),
            status=EventStatus.UPCOMING,
        )
        self.db.add(event)
        await self.db.commit()
        await self.db.refresh(event)
        logger.info(f"Event {event.event_id} created: {event.title}")
        return event

    async def get_event(self, event_id: int) -> Event:
        """
        Get event by ID.

        Raises:
            NotFoundError: If the event does not exist
        """
        result = await self.db.execute(
            select(Event)
            .options(selectinload(Event.category))
            .where(Event.event_id == event_id)
        )
        event = result.scalar_one_or_none()
        if not event:
            raise NotFoundError("Event", event_id)
        return event

    async def get_events(
        self,
        status: EventStatus | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Event], int]:
        """Get events with optional filtering."""
        query = select(Event)

        if status:
            query = query.where(Event.status == status)

        # Get total count
        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.db.execute(count_query)).scalar() or 0

        # Get paginated results
        query = query.order_by(Event.starts_at.desc())
        query = query.offset((page - 1) * page_size).limit(page_size)

        result = await self.db.execute(query)
        events = list(result.scalars().all())

        return events, total

    async def get_upcoming_events(self, limit: int = 50) -> list[Event]:
        """Upcoming events that have not started yet, soonest first."""
        result = await self.db.execute(
            select(Event)
            .where(
                Event.status == EventStatus.UPCOMING,
                Event.starts_at >= utcnow(),
            )
            .order_by(Event.starts_at)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def search_events(
        self,
        category: str | None = None,
        location: str | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> list[Event]:
        """Search events by category name and venue, both case-insensitive substrings."""
        query = select(Event)

        if category:
            query = query.join(Category, Event.category_id == Category.category_id).where(
                Category.name.ilike(f"%{category}%")
            )
        if location:
            query = query.where(Event.venue.ilike(f"%{location}%"))

        query = (
            query.order_by(Event.starts_at)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_events_in_range(
        self,
        start: datetime,
        end: datetime,
    ) -> list[Event]:
        """Events starting within [start, end]."""
        if start > end:
            raise InvalidInputError("Range start must not be after range end")

        result = await self.db.execute(
            select(Event)
            .where(Event.starts_at >= start, Event.starts_at <= end)
            .order_by(Event.starts_at)
        )
        return list(result.scalars().all())

    async def get_top_rated(self, limit: int = 10, min_reviews: int = 1) -> list[Event]:
        """Events with at least min_reviews reviews, best average rating first."""
        result = await self.db.execute(
            select(Event)
            .where(Event.total_reviews >= min_reviews)
            .order_by(Event.average_rating.desc(), Event.total_reviews.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def update_event(
        self,
        event_id: int,
        event_data: EventUpdate,
    ) -> Event:
        """
        Update an event.

        Capacity changes are applied inside the event's critical section so
        capacity can never drop below the quantity already sold.

        Raises:
            NotFoundError: If the event or the new category does not exist
            InvalidInputError: If a required field is null or the time window is invalid
            ConflictError: If the new capacity is below the sold quantity
        """
        update_data = event_data.model_dump(exclude_unset=True)
        cleared = sorted(
            field
            for field, value in update_data.items()
            if value is None and field not in NULLABLE_EVENT_FIELDS
        )
        if cleared:
            raise InvalidInputError(f"Fields cannot be null: {', '.join(cleared)}")

        if update_data.get("category_id") is not None:
            await self._ensure_category(update_data["category_id"])

        if "capacity" in update_data and self.redis is not None:
            try:
                async with distributed_lock(self.redis, event_lock_key(event_id)):
                    try:
                        return await self._do_update(event_id, update_data)
                    except Exception:
                        await self.db.rollback()
                        raise
            except DistributedLockError:
                raise LockUnavailableError(
                    "Event is busy, unable to update capacity. Please try again."
                )

        return await self._do_update(event_id, update_data)

    async def _do_update(self, event_id: int, update_data: dict) -> Event:
        result = await self.db.execute(
            select(Event)
            .where(Event.event_id == event_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        event = result.scalar_one_or_none()
        if not event:
            raise NotFoundError("Event", event_id)

        starts_at = update_data.get("starts_at", event.starts_at)
        ends_at = update_data.get("ends_at", event.ends_at)
        if starts_at >= ends_at:
            raise InvalidInputError("Event start time must be before its end time")

        if "capacity" in update_data:
            sold = await AvailabilityService(self.db).sold_quantity(event_id)
            if update_data["capacity"] < sold:
                raise ConflictError(
                    f"Capacity cannot be lower than the {sold} tickets already sold"
                )

        for field, value in update_data.items():
            setattr(event, field, value)

        await self.db.commit()
        await self.db.refresh(event)
        return event

    async def delete_event(self, event_id: int) -> None:
        """
        Delete an event together with all of its tickets.

        Raises:
            NotFoundError: If the event does not exist
        """
        event = await self.db.get(Event, event_id)
        if not event:
            raise NotFoundError("Event", event_id)

        await self.db.execute(delete(Ticket).where(Ticket.event_id == event_id))
        await self.db.delete(event)
        await self.db.commit()
        logger.info(f"Event {event_id} deleted with its tickets")

    async def refresh_statuses(self, now: datetime | None = None) -> dict[str, int]:
        """
        Move events along their timeline.

        upcoming -> ongoing once started, upcoming/ongoing -> completed once
        ended. Cancelled events are left alone.
        """
        now = now or utcnow()

        completed = await self.db.execute(
            update(Event)
            .where(
                Event.status.in_([EventStatus.UPCOMING, EventStatus.ONGOING]),
                Event.ends_at <= now,
            )
            .values(status=EventStatus.COMPLETED)
        )
        started = await self.db.execute(
            update(Event)
            .where(
                Event.status == EventStatus.UPCOMING,
                Event.starts_at <= now,
                Event.ends_at > now,
            )
            .values(status=EventStatus.ONGOING)
        )
        await self.db.commit()

        return {
            "completed": completed.rowcount or 0,
            "ongoing": started.rowcount or 0,
        }

    async def _ensure_category(self, category_id: int | None) -> None:
        if category_id is None:
            return
        if await self.db.get(Category, category_id) is None:
            raise NotFoundError("Category", category_id)
