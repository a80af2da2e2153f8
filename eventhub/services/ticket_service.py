"""Ticket lifecycle: lookup, listing and cancellation."""

import logging
from datetime import timedelta

import redis.asyncio as redis
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from eventhub.config import get_settings
from eventhub.distributed_lock import (
    DistributedLockError,
    distributed_lock,
    event_lock_key,
)
from eventhub.errors import (
    ForbiddenError,
    InvalidStateError,
    LockUnavailableError,
    NotFoundError,
)
from eventhub.models.base import utcnow
from eventhub.models.ticket import PaymentStatus, Ticket
from eventhub.models.user import User
from eventhub.payments import PaymentGateway

logger = logging.getLogger(__name__)

settings = get_settings()


class TicketService:
    """Service for post-purchase ticket operations."""

    def __init__(
        self,
        db: AsyncSession,
        redis_client: redis.Redis | None = None,
        gateway: PaymentGateway | None = None,
    ):
        self.db = db
        self.redis = redis_client
        self.gateway = gateway

    async def get_ticket(self, requester: User, ticket_id: int) -> Ticket:
        """
        Get a ticket with its event, visible to its owner or an admin.

        Raises:
            NotFoundError: If the ticket does not exist
            ForbiddenError: If the ticket belongs to another user
        """
        result = await self.db.execute(
            select(Ticket)
            .options(selectinload(Ticket.event))
            .where(Ticket.ticket_id == ticket_id)
        )
        ticket = result.scalar_one_or_none()
        if not ticket:
            raise NotFoundError("Ticket", ticket_id)
        if ticket.user_id != requester.user_id and not requester.is_admin:
            raise ForbiddenError("Cannot access another user's ticket")
        return ticket

    async def list_user_tickets(
        self,
        user_id: int,
        status: PaymentStatus | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[Ticket], int]:
        """Get a user's tickets, newest first."""
        query = select(Ticket).where(Ticket.user_id == user_id)

        if status:
            query = query.where(Ticket.payment_status == status)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await self.db.execute(count_query)).scalar() or 0

        query = (
            query.options(selectinload(Ticket.event))
            .order_by(Ticket.booked_at.desc(), Ticket.ticket_id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def cancel(self, requester: User, ticket_id: int) -> Ticket:
        """
        Cancel a paid ticket and refund it.

        Refunded tickets drop out of the sold sum, so their quantity
        returns to the event's available capacity.

        Raises:
            NotFoundError: If the ticket does not exist
            ForbiddenError: If the ticket belongs to another user
            InvalidStateError: If the ticket is not paid or the event starts too soon
        """
        ticket = await self.get_ticket(requester, ticket_id)

        try:
            async with distributed_lock(self.redis, event_lock_key(ticket.event_id)):
                try:
                    ticket = await self._do_cancel(ticket_id)
                except Exception:
                    await self.db.rollback()
                    raise
        except DistributedLockError:
            raise LockUnavailableError(
                "Event is busy, unable to cancel ticket. Please try again."
            )

        logger.info(
            f"Ticket {ticket.ticket_number} refunded, returning {ticket.quantity} "
            f"to event {ticket.event_id}"
        )
        await self.gateway.refund(ticket.transaction_id, ticket.total_amount)
        return ticket

    async def _do_cancel(self, ticket_id: int) -> Ticket:
        """
        Internal method to transition a ticket to refunded.
        Must be called within the event's distributed lock.
        """
        result = await self.db.execute(
            select(Ticket)
            .options(selectinload(Ticket.event))
            .where(Ticket.ticket_id == ticket_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        ticket = result.scalar_one_or_none()
        if not ticket:
            raise NotFoundError("Ticket", ticket_id)

        if ticket.payment_status != PaymentStatus.PAID:
            raise InvalidStateError("Only paid tickets can be cancelled")

        window = timedelta(hours=settings.CANCELLATION_WINDOW_HOURS)
        if ticket.event.starts_at - utcnow() < window:
            raise InvalidStateError(
                f"Tickets can only be cancelled up to "
                f"{settings.CANCELLATION_WINDOW_HOURS} hours before the event"
            )

        ticket.transition_to(PaymentStatus.REFUNDED)
        ticket.refunded_at = utcnow()

        await self.db.commit()
        return ticket
