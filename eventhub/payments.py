"""Payment gateway interface and the simulated implementation."""

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ulid import ULID

from eventhub.config import get_settings
from eventhub.errors import PaymentDeclinedError
from eventhub.models.base import utcnow

logger = logging.getLogger(__name__)

settings = get_settings()


@dataclass(frozen=True)
class PaymentResult:
    """Outcome of a successful charge."""

    transaction_id: str
    amount: Decimal
    method: str
    paid_at: datetime
    card_last_four: str | None = None


class PaymentGateway(ABC):
    """Interface for charging purchases and refunding cancellations."""

    @abstractmethod
    async def charge(
        self,
        amount: Decimal,
        method: str,
        card_last_four: str | None = None,
    ) -> PaymentResult:
        """Charge amount; raise PaymentDeclinedError when the charge is refused."""
        ...

    @abstractmethod
    async def refund(self, transaction_id: str | None, amount: Decimal) -> None:
        """Issue a refund instruction for a previous charge."""
        ...


class SimulatedPaymentGateway(PaymentGateway):
    """
    Gateway stand-in with an artificial delay and a random decline rate.

    Charges are bounded by a timeout; an expired charge counts as declined.
    Refunds are only logged.
    """

    def __init__(
        self,
        delay_seconds: float | None = None,
        failure_rate: float | None = None,
        timeout_seconds: float | None = None,
        rng: random.Random | None = None,
    ):
        self.delay_seconds = (
            settings.PAYMENT_DELAY_SECONDS if delay_seconds is None else delay_seconds
        )
        self.failure_rate = (
            settings.PAYMENT_FAILURE_RATE if failure_rate is None else failure_rate
        )
        self.timeout_seconds = (
            settings.PAYMENT_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
        )
        self.rng = rng or random.Random()
        self.refunds: list[tuple[str | None, Decimal]] = []

    async def charge(
        self,
        amount: Decimal,
        method: str,
        card_last_four: str | None = None,
    ) -> PaymentResult:
        try:
            return await asyncio.wait_for(
                self._process(amount, method, card_last_four),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Payment of {amount} via {method} timed out")
            raise PaymentDeclinedError("Payment gateway timed out. Please try again.")

    async def _process(
        self,
        amount: Decimal,
        method: str,
        card_last_four: str | None,
    ) -> PaymentResult:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        if self.rng.random() < self.failure_rate:
            logger.info(f"Payment simulation: FAILED - {amount} via {method}")
            raise PaymentDeclinedError(
                "Payment processing failed. Please try again or use a different payment method."
            )

        logger.info(f"Payment simulation: SUCCESS - {amount} via {method}")
        return PaymentResult(
            transaction_id=f"TX-{ULID()}",
            amount=amount,
            method=method,
            paid_at=utcnow(),
            card_last_four=card_last_four or "1234",
        )

    async def refund(self, transaction_id: str | None, amount: Decimal) -> None:
        self.refunds.append((transaction_id, amount))
        logger.info(f"Refund instruction issued: {amount} for transaction {transaction_id}")


_gateway: PaymentGateway | None = None


def get_payment_gateway() -> PaymentGateway:
    """Get the process-wide payment gateway."""
    global _gateway
    if _gateway is None:
        _gateway = SimulatedPaymentGateway()
    return _gateway
