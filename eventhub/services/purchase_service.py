"""Ticket purchase orchestration."""

import logging
from dataclasses import dataclass
from decimal import Decimal

import redis.asyncio as redis
from sqlalchemy import inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from ulid import ULID

from eventhub.config import get_settings
from eventhub.distributed_lock import (
    DistributedLockError,
    distributed_lock,
    event_lock_key,
)
from eventhub.errors import (
    ConflictError,
    InvalidInputError,
    InvalidStateError,
    LockUnavailableError,
    NotFoundError,
)
from eventhub.models.event import Event, EventStatus
from eventhub.models.ticket import PaymentStatus, Ticket
from eventhub.payments import PaymentGateway, PaymentResult
from eventhub.services.availability_service import AvailabilityService

logger = logging.getLogger(__name__)

settings = get_settings()


@dataclass(frozen=True)
class PurchaseResult:
    """Committed ticket with the event it belongs to and the payment receipt."""

    ticket: Ticket
    event: Event
    payment: PaymentResult


def generate_ticket_number() -> str:
    """Unique, human-readable ticket number."""
    return f"TKT-{ULID()}"


def build_qr_code_url(ticket_number: str) -> str:
    return f"{settings.QR_CODE_BASE_URL}{ticket_number}"


class PurchaseService:
    """
    Service coordinating validation, availability, payment and persistence.

    The ticket insert happens inside a per-event critical section (Redis lock
    plus a row lock on the event) where availability is recomputed, so two
    purchases racing for the last units can never both commit. A charge whose
    ticket cannot be committed is refunded before the error is raised.
    """

    def __init__(
        self,
        db: AsyncSession,
        redis_client: redis.Redis,
        gateway: PaymentGateway,
    ):
        self.db = db
        self.redis = redis_client
        self.gateway = gateway
        self.availability = AvailabilityService(db)

    async def purchase(
        self,
        user_id: int,
        event_id: int,
        quantity: int,
        payment_method: str = "credit_card",
        card_last_four: str | None = None,
    ) -> PurchaseResult:
        """
        Purchase tickets for an event.

        Args:
            user_id: Purchasing user ID
            event_id: Event ID
            quantity: Number of tickets
            payment_method: Payment method name
            card_last_four: Last four card digits, if paying by card

        Returns:
            The committed ticket, its event and the payment receipt

        Raises:
            InvalidInputError: If quantity or payment method is invalid
            NotFoundError: If the event does not exist
            InvalidStateError: If the event is not upcoming
            ConflictError: If not enough tickets remain
            PaymentDeclinedError: If the payment is declined or times out
            LockUnavailableError: If the event is too busy to commit
        """
        self._validate_input(quantity, payment_method)

        event = await self.db.get(Event, event_id)
        if not event:
            raise NotFoundError("Event", event_id)
        self._ensure_purchasable(event)

        # Fail fast before charging
        availability = await self.availability.for_event(event)
        if availability.available < quantity:
            raise ConflictError(
                f"Not enough tickets available. Only {max(availability.available, 0)} tickets left."
            )

        total_amount = Decimal(event.ticket_price) * quantity
        ticket_number = generate_ticket_number()
        ticket = Ticket(
            event_id=event_id,
            user_id=user_id,
            ticket_number=ticket_number,
            quantity=quantity,
            total_amount=total_amount,
            payment_status=PaymentStatus.PENDING,
            payment_method=payment_method,
            qr_code=build_qr_code_url(ticket_number),
        )

        # End the read transaction; the commit phase re-reads under the lock
        await self.db.rollback()

        logger.info(
            f"Charging {total_amount} for {quantity} ticket(s) to event {event_id} "
            f"(user {user_id}, ticket {ticket_number})"
        )
        payment = await self.gateway.charge(total_amount, payment_method, card_last_four)

        try:
            event = await self._commit_under_lock(event_id, quantity, ticket, payment)
        except Exception:
            if inspect(ticket).has_identity:
                logger.error(
                    f"Ticket {ticket_number} was committed before the failure; "
                    f"keeping charge {payment.transaction_id}"
                )
                raise
            logger.warning(
                f"Ticket {ticket_number} not committed, refunding {payment.transaction_id}"
            )
            await self.gateway.refund(payment.transaction_id, payment.amount)
            raise

        await self.db.refresh(ticket)
        logger.info(
            f"Ticket {ticket.ticket_number} committed: {quantity} for event {event_id}"
        )
        return PurchaseResult(ticket=ticket, event=event, payment=payment)

    def _validate_input(self, quantity: int, payment_method: str) -> None:
        if quantity is None or quantity < 1:
            raise InvalidInputError("Quantity must be at least 1")
        limit = settings.MAX_TICKETS_PER_PURCHASE
        if limit is not None and quantity > limit:
            raise InvalidInputError(f"Cannot purchase more than {limit} tickets at once")
        if not payment_method:
            raise InvalidInputError("Payment method is required")

    def _ensure_purchasable(self, event: Event) -> None:
        if event.status != EventStatus.UPCOMING:
            raise InvalidStateError(
                "Cannot purchase tickets for completed or cancelled events"
            )

    async def _commit_under_lock(
        self,
        event_id: int,
        quantity: int,
        ticket: Ticket,
        payment: PaymentResult,
    ) -> Event:
        try:
            async with distributed_lock(self.redis, event_lock_key(event_id)):
                try:
                    return await self._do_commit(event_id, quantity, ticket, payment)
                except Exception:
                    # Drop the row lock before the event lock is released
                    await self.db.rollback()
                    raise
        except DistributedLockError:
            raise LockUnavailableError(
                "Event is busy, unable to complete purchase. Please try again."
            )

    async def _do_commit(
        self,
        event_id: int,
        quantity: int,
        ticket: Ticket,
        payment: PaymentResult,
    ) -> Event:
        """
        Internal method to persist the ticket.
        Must be called within the event's distributed lock.
        """
        result = await self.db.execute(
            select(Event)
            .where(Event.event_id == event_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        event = result.scalar_one_or_none()
        if not event:
            raise NotFoundError("Event", event_id)
        self._ensure_purchasable(event)

        availability = await self.availability.for_event(event)
        if availability.available < quantity:
            raise ConflictError(
                f"Not enough tickets available. Only {max(availability.available, 0)} tickets left."
            )

        ticket.transition_to(PaymentStatus.PAID)
        ticket.payment_method = payment.method
        ticket.transaction_id = payment.transaction_id
        ticket.paid_at = payment.paid_at
        ticket.card_last_four = payment.card_last_four

        self.db.add(ticket)
        await self.db.commit()
        return event
