"""Tests for the event catalog and categories."""

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from eventhub.errors import ConflictError, InvalidInputError, NotFoundError
from eventhub.models import Category, EventStatus, Ticket
from eventhub.models.base import utcnow
from eventhub.schemas.category import CategoryCreate
from eventhub.schemas.event import EventCreate, EventUpdate
from eventhub.services.category_service import DEFAULT_CATEGORIES, CategoryService
from eventhub.services.event_service import EventService
from eventhub.tests.factories import create_event, create_paid_ticket


def event_payload(**overrides) -> EventCreate:
    starts_at = utcnow() + timedelta(days=10)
    data = {
        "title": "PyCon",
        "description": "Talks and sprints",
        "venue": "Convention Center",
        "city": "Hanoi",
        "country": "Vietnam",
        "starts_at": starts_at,
        "ends_at": starts_at + timedelta(hours=8),
        "organizer_name": "PSF",
        "organizer_email": "events@example.com",
        "organizer_phone": "+8400000001",
        "capacity": 100,
        "ticket_price": "50.00",
    }
    data.update(overrides)
    return EventCreate(**data)


class TestEventCatalog:
    """Event create, read, update and delete."""

    async def test_create_event_is_upcoming(self, db):
        event = await EventService(db).create_event(event_payload())

        assert event.event_id is not None
        assert event.status == EventStatus.UPCOMING
        assert event.average_rating == 0
        assert event.total_reviews == 0

    async def test_create_event_with_unknown_category(self, db):
        with pytest.raises(NotFoundError):
            await EventService(db).create_event(event_payload(category_id=999))

    def test_start_must_precede_end(self):
        starts_at = utcnow() + timedelta(days=1)
        with pytest.raises(ValueError):
            event_payload(starts_at=starts_at, ends_at=starts_at)

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            event_payload(capacity=0)

    async def test_get_missing_event(self, db):
        with pytest.raises(NotFoundError):
            await EventService(db).get_event(12345)

    async def test_update_fields(self, db, redis_client):
        event = await create_event(db, capacity=10)
        service = EventService(db, redis_client)

        updated = await service.update_event(
            event.event_id, EventUpdate(title="Renamed", capacity=20)
        )

        assert updated.title == "Renamed"
        assert updated.capacity == 20

    async def test_capacity_cannot_drop_below_sold(self, db, redis_client, buyer):
        event = await create_event(db, capacity=10)
        event_id = event.event_id
        await create_paid_ticket(db, event, buyer, quantity=6)
        service = EventService(db, redis_client)

        with pytest.raises(ConflictError):
            await service.update_event(event_id, EventUpdate(capacity=5))

        unchanged = await service.get_event(event_id)
        assert unchanged.capacity == 10

    async def test_update_rejects_inverted_window(self, db, redis_client):
        event = await create_event(db)
        event_id = event.event_id
        service = EventService(db, redis_client)

        with pytest.raises(InvalidInputError):
            await service.update_event(
                event_id, EventUpdate(ends_at=utcnow() - timedelta(days=1))
            )

    @pytest.mark.parametrize("field", ["title", "capacity", "starts_at"])
    async def test_update_rejects_null_required_field(self, db, redis_client, field):
        event = await create_event(db, capacity=10)
        event_id = event.event_id
        service = EventService(db, redis_client)

        with pytest.raises(InvalidInputError) as exc_info:
            await service.update_event(event_id, EventUpdate(**{field: None}))

        assert field in exc_info.value.message
        unchanged = await service.get_event(event_id)
        assert unchanged.capacity == 10
        assert unchanged.title == "Launch Party"

    async def test_update_clears_category(self, db, redis_client):
        category = Category(name="Music")
        db.add(category)
        await db.commit()
        event = await create_event(db)
        event.category_id = category.category_id
        await db.commit()
        service = EventService(db, redis_client)

        updated = await service.update_event(event.event_id, EventUpdate(category_id=None))

        assert updated.category_id is None

    async def test_delete_removes_tickets(self, db, buyer):
        event = await create_event(db)
        event_id = event.event_id
        await create_paid_ticket(db, event, buyer, quantity=2)
        service = EventService(db)

        await service.delete_event(event_id)

        with pytest.raises(NotFoundError):
            await service.get_event(event_id)
        remaining = await db.scalar(
            select(func.count(Ticket.ticket_id)).where(Ticket.event_id == event_id)
        )
        assert remaining == 0

    async def test_delete_missing_event(self, db):
        with pytest.raises(NotFoundError):
            await EventService(db).delete_event(777)


class TestEventQueries:
    """Listing and searching events."""

    async def test_filter_by_status(self, db):
        await create_event(db, title="Soon")
        await create_event(db, title="Gone", status=EventStatus.CANCELLED)

        events, total = await EventService(db).get_events(status=EventStatus.CANCELLED)

        assert total == 1
        assert events[0].title == "Gone"

    async def test_upcoming_excludes_started_and_cancelled(self, db):
        await create_event(db, title="Next week")
        await create_event(db, title="Yesterday", starts_in=timedelta(days=-1))
        await create_event(db, title="Cancelled", status=EventStatus.CANCELLED)

        events = await EventService(db).get_upcoming_events()

        assert [e.title for e in events] == ["Next week"]

    async def test_search_by_category_and_location(self, db):
        service = EventService(db)
        music = await CategoryService(db).create_category(CategoryCreate(name="Music"))
        await service.create_event(
            event_payload(title="Concert", category_id=music.category_id, venue="Opera House")
        )
        await service.create_event(event_payload(title="Meetup", venue="Opera House"))

        by_category = await service.search_events(category="mus")
        by_location = await service.search_events(location="opera")

        assert [e.title for e in by_category] == ["Concert"]
        assert {e.title for e in by_location} == {"Concert", "Meetup"}

    async def test_time_range(self, db):
        await create_event(db, title="In range", starts_in=timedelta(days=2))
        await create_event(db, title="Out of range", starts_in=timedelta(days=20))
        now = utcnow()

        events = await EventService(db).get_events_in_range(now, now + timedelta(days=5))

        assert [e.title for e in events] == ["In range"]

    async def test_time_range_rejects_inverted_bounds(self, db):
        now = utcnow()
        with pytest.raises(InvalidInputError):
            await EventService(db).get_events_in_range(now, now - timedelta(days=1))

    async def test_top_rated_skips_unreviewed(self, db):
        good = await create_event(db, title="Good")
        best = await create_event(db, title="Best")
        await create_event(db, title="Unrated")
        good.average_rating, good.total_reviews = 4.0, 10
        best.average_rating, best.total_reviews = 4.8, 3
        await db.commit()

        events = await EventService(db).get_top_rated()

        assert [e.title for e in events] == ["Best", "Good"]

    async def test_top_rated_minimum_reviews(self, db):
        popular = await create_event(db, title="Popular")
        niche = await create_event(db, title="Niche")
        popular.average_rating, popular.total_reviews = 4.2, 12
        niche.average_rating, niche.total_reviews = 5.0, 2
        await db.commit()

        events = await EventService(db).get_top_rated(min_reviews=5)

        assert [e.title for e in events] == ["Popular"]


class TestStatusRefresh:
    """Timeline-driven status changes."""

    async def test_refresh_moves_events_along(self, db):
        started = await create_event(db, title="Started", starts_in=timedelta(hours=-1))
        ended = await create_event(db, title="Ended", starts_in=timedelta(days=-2))
        future = await create_event(db, title="Future")
        cancelled = await create_event(
            db, title="Cancelled", starts_in=timedelta(days=-2), status=EventStatus.CANCELLED
        )
        ids = [e.event_id for e in (started, ended, future, cancelled)]

        counts = await EventService(db).refresh_statuses()

        assert counts == {"completed": 1, "ongoing": 1}
        db.expire_all()
        statuses = [(await EventService(db).get_event(i)).status for i in ids]
        assert statuses == [
            EventStatus.ONGOING,
            EventStatus.COMPLETED,
            EventStatus.UPCOMING,
            EventStatus.CANCELLED,
        ]


class TestCategories:
    """Category management."""

    async def test_duplicate_name(self, db):
        service = CategoryService(db)
        await service.create_category(CategoryCreate(name="Sports"))

        with pytest.raises(InvalidInputError):
            await service.create_category(CategoryCreate(name="Sports"))

    async def test_initialize_replaces_categories(self, db):
        service = CategoryService(db)
        custom = await service.create_category(CategoryCreate(name="Custom"))
        event = await create_event(db)
        event.category_id = custom.category_id
        await db.commit()
        event_id = event.event_id

        categories = await service.initialize_defaults()

        assert {c.name for c in categories} == {name for name, _ in DEFAULT_CATEGORIES}
        assert await db.scalar(select(func.count(Category.category_id))) == len(
            DEFAULT_CATEGORIES
        )
        refreshed = await EventService(db).get_event(event_id)
        assert refreshed.category_id is None

    async def test_counts(self, db):
        service = CategoryService(db)
        tech = await service.create_category(CategoryCreate(name="Tech"))
        await service.create_category(CategoryCreate(name="Art"))
        event = await create_event(db)
        event.category_id = tech.category_id
        await db.commit()

        rows = await service.get_categories_with_counts()

        assert [(c.name, n) for c, n in rows] == [("Tech", 1), ("Art", 0)]
