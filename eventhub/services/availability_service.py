"""Availability derived from the paid tickets of an event."""

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.errors import NotFoundError
from eventhub.models.event import Event
from eventhub.models.ticket import PaymentStatus, Ticket


@dataclass(frozen=True)
class Availability:
    """Capacity, sold quantity and remaining quantity of one event."""

    event_id: int
    capacity: int
    sold: int

    @property
    def available(self) -> int:
        return self.capacity - self.sold

    @property
    def is_available(self) -> bool:
        return self.available > 0


class AvailabilityService:
    """
    Computes remaining capacity from the ticket ledger.

    Capacity is never decremented in place: sold is always the sum of
    quantities over tickets in the paid state, so refunded tickets drop out
    of the sum and return their capacity to the pool.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def sold_quantity(self, event_id: int) -> int:
        """Sum of quantities over paid tickets for an event."""
        result = await self.db.execute(
            select(func.coalesce(func.sum(Ticket.quantity), 0)).where(
                Ticket.event_id == event_id,
                Ticket.payment_status == PaymentStatus.PAID,
            )
        )
        return int(result.scalar_one())

    async def for_event(self, event: Event) -> Availability:
        """Availability of an already loaded event."""
        sold = await self.sold_quantity(event.event_id)
        return Availability(
            event_id=event.event_id,
            capacity=event.capacity,
            sold=sold,
        )

    async def get_availability(self, event_id: int) -> Availability:
        """
        Availability of an event by ID.

        Raises:
            NotFoundError: If the event does not exist
        """
        event = await self.db.get(Event, event_id)
        if not event:
            raise NotFoundError("Event", event_id)
        return await self.for_event(event)
