"""Tests for availability derived from the ticket ledger."""

import pytest

from eventhub.errors import NotFoundError
from eventhub.models import PaymentStatus
from eventhub.services.availability_service import AvailabilityService
from eventhub.tests.factories import create_event, create_paid_ticket


class TestAvailability:
    """Availability calculator behaviour."""

    async def test_event_without_tickets(self, db):
        event = await create_event(db, capacity=10)

        availability = await AvailabilityService(db).get_availability(event.event_id)

        assert availability.capacity == 10
        assert availability.sold == 0
        assert availability.available == 10
        assert availability.is_available is True

    async def test_sums_paid_quantities(self, db, buyer):
        event = await create_event(db, capacity=10)
        await create_paid_ticket(db, event, buyer, quantity=3)
        await create_paid_ticket(db, event, buyer, quantity=4)

        availability = await AvailabilityService(db).get_availability(event.event_id)

        assert availability.sold == 7
        assert availability.available == 3

    async def test_ignores_refunded_tickets(self, db, buyer):
        event = await create_event(db, capacity=5)
        await create_paid_ticket(db, event, buyer, quantity=2)
        refunded = await create_paid_ticket(db, event, buyer, quantity=3)
        refunded.payment_status = PaymentStatus.REFUNDED
        await db.commit()

        availability = await AvailabilityService(db).get_availability(event.event_id)

        assert availability.sold == 2
        assert availability.available == 3

    async def test_sold_out_is_not_available(self, db, buyer):
        event = await create_event(db, capacity=2)
        await create_paid_ticket(db, event, buyer, quantity=2)

        availability = await AvailabilityService(db).get_availability(event.event_id)

        assert availability.available == 0
        assert availability.is_available is False

    async def test_other_events_do_not_count(self, db, buyer):
        event = await create_event(db, capacity=5)
        other = await create_event(db, capacity=5, title="Other")
        await create_paid_ticket(db, other, buyer, quantity=5)

        availability = await AvailabilityService(db).get_availability(event.event_id)

        assert availability.sold == 0

    async def test_missing_event(self, db):
        with pytest.raises(NotFoundError):
            await AvailabilityService(db).get_availability(9999)
