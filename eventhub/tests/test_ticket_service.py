"""Tests for ticket lookup, listing and cancellation."""

from datetime import timedelta

import pytest

from eventhub.errors import ForbiddenError, InvalidStateError, NotFoundError
from eventhub.models import PaymentStatus, Ticket
from eventhub.services.availability_service import AvailabilityService
from eventhub.services.ticket_service import TicketService
from eventhub.tests.factories import create_event, create_paid_ticket, create_user


class TestCancellation:
    """Cancelling paid tickets."""

    async def test_cancel_returns_quantity(self, db, redis_client, gateway, buyer):
        event = await create_event(db, capacity=5, starts_in=timedelta(hours=48))
        ticket = await create_paid_ticket(db, event, buyer, quantity=2)
        service = TicketService(db, redis_client, gateway)

        cancelled = await service.cancel(buyer, ticket.ticket_id)

        assert cancelled.payment_status == PaymentStatus.REFUNDED
        assert cancelled.refunded_at is not None
        assert gateway.refunds == [(ticket.transaction_id, ticket.total_amount)]

        availability = await AvailabilityService(db).get_availability(event.event_id)
        assert availability.sold == 0
        assert availability.available == 5

    async def test_too_close_to_start(self, db, redis_client, gateway, buyer):
        event = await create_event(db, starts_in=timedelta(hours=2))
        ticket = await create_paid_ticket(db, event, buyer)
        ticket_id = ticket.ticket_id
        service = TicketService(db, redis_client, gateway)

        with pytest.raises(InvalidStateError):
            await service.cancel(buyer, ticket_id)

        refreshed = await db.get(Ticket, ticket_id)
        assert refreshed.payment_status == PaymentStatus.PAID
        assert gateway.refunds == []

    async def test_second_cancel_is_rejected(self, db, redis_client, gateway, buyer):
        event = await create_event(db, starts_in=timedelta(days=3))
        ticket = await create_paid_ticket(db, event, buyer)
        service = TicketService(db, redis_client, gateway)

        await service.cancel(buyer, ticket.ticket_id)
        with pytest.raises(InvalidStateError):
            await service.cancel(buyer, ticket.ticket_id)

        assert len(gateway.refunds) == 1

    async def test_other_user_cannot_cancel(self, db, redis_client, gateway, buyer):
        event = await create_event(db)
        ticket = await create_paid_ticket(db, event, buyer)
        stranger = await create_user(db, email="stranger@example.com")
        service = TicketService(db, redis_client, gateway)

        with pytest.raises(ForbiddenError):
            await service.cancel(stranger, ticket.ticket_id)

        assert gateway.refunds == []

    async def test_admin_can_cancel(self, db, redis_client, gateway, buyer, admin):
        event = await create_event(db)
        ticket = await create_paid_ticket(db, event, buyer)
        service = TicketService(db, redis_client, gateway)

        cancelled = await service.cancel(admin, ticket.ticket_id)

        assert cancelled.payment_status == PaymentStatus.REFUNDED

    async def test_missing_ticket(self, db, redis_client, gateway, buyer):
        service = TicketService(db, redis_client, gateway)

        with pytest.raises(NotFoundError):
            await service.cancel(buyer, 9999)


class TestTicketLookup:
    """Reading tickets."""

    async def test_owner_reads_ticket_with_event(self, db, buyer):
        event = await create_event(db, title="Jazz Night")
        ticket = await create_paid_ticket(db, event, buyer)

        found = await TicketService(db).get_ticket(buyer, ticket.ticket_id)

        assert found.ticket_number == ticket.ticket_number
        assert found.event.title == "Jazz Night"

    async def test_other_user_is_forbidden(self, db, buyer):
        event = await create_event(db)
        ticket = await create_paid_ticket(db, event, buyer)
        stranger = await create_user(db, email="stranger@example.com")

        with pytest.raises(ForbiddenError):
            await TicketService(db).get_ticket(stranger, ticket.ticket_id)

    async def test_list_filters_by_status(self, db, buyer):
        event = await create_event(db)
        await create_paid_ticket(db, event, buyer)
        refunded = await create_paid_ticket(db, event, buyer, quantity=2)
        refunded.payment_status = PaymentStatus.REFUNDED
        await db.commit()
        service = TicketService(db)

        all_tickets, total = await service.list_user_tickets(buyer.user_id)
        paid, paid_total = await service.list_user_tickets(
            buyer.user_id, status=PaymentStatus.PAID
        )

        assert total == 2
        assert len(all_tickets) == 2
        assert paid_total == 1
        assert paid[0].payment_status == PaymentStatus.PAID

    async def test_list_paginates(self, db, buyer):
        event = await create_event(db, capacity=50)
        for _ in range(5):
            await create_paid_ticket(db, event, buyer)

        page, total = await TicketService(db).list_user_tickets(
            buyer.user_id, page=2, page_size=2
        )

        assert total == 5
        assert len(page) == 2
