"""Ticket model and payment status state machine."""

import enum
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventhub.errors import InvalidStateError
from eventhub.models.base import Base, BigIntPK, utcnow

if TYPE_CHECKING:
    from eventhub.models.event import Event
    from eventhub.models.user import User


class PaymentStatus(str, enum.Enum):
    """Payment status enum."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


ALLOWED_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.PAID: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.FAILED: frozenset(),
    PaymentStatus.REFUNDED: frozenset(),
}


def ensure_transition(current: PaymentStatus, target: PaymentStatus) -> None:
    """Raise InvalidStateError unless current -> target is a legal transition."""
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStateError(
            f"Illegal ticket status transition: {current.value} -> {target.value}"
        )


class Ticket(Base):
    """Ticket model; the paid subset of tickets is the sold inventory."""

    __tablename__ = "tickets"

    ticket_id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    event_id: Mapped[int] = mapped_column(
        ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.user_id"), nullable=False
    )
    ticket_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus), default=PaymentStatus.PENDING
    )
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)

    # Payment details
    transaction_id: Mapped[str | None] = mapped_column(String(100))
    paid_at: Mapped[datetime | None] = mapped_column(DateTime)
    card_last_four: Mapped[str | None] = mapped_column(String(4))

    qr_code: Mapped[str | None] = mapped_column(String(500))
    booked_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    refunded_at: Mapped[datetime | None] = mapped_column(DateTime)

    # Relationships
    event: Mapped["Event"] = relationship("Event", back_populates="tickets")
    user: Mapped["User"] = relationship("User", back_populates="tickets")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_ticket_quantity_positive"),
        Index("idx_ticket_event_status", "event_id", "payment_status"),
        Index("idx_ticket_event_user", "event_id", "user_id"),
        Index("idx_ticket_user", "user_id"),
    )

    def transition_to(self, target: PaymentStatus) -> None:
        """Move payment_status along the state machine."""
        ensure_transition(self.payment_status, target)
        self.payment_status = target
