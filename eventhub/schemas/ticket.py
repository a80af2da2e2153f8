"""Ticket and purchase schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from eventhub.models.ticket import PaymentStatus
from eventhub.schemas.common import BaseSchema


class PaymentDetails(BaseSchema):
    """Card data accepted by the simulated gateway. Only the last four digits are kept."""

    card_last_four: str | None = Field(None, pattern=r"^\d{4}$")
    card_holder: str | None = Field(None, max_length=100)


class PurchaseRequest(BaseSchema):
    """Schema for purchasing tickets. Quantity bounds are enforced by the purchase service."""

    event_id: int
    quantity: int
    payment_method: str = Field("credit_card", min_length=1, max_length=50)
    payment_details: PaymentDetails = Field(default_factory=PaymentDetails)


class TicketEventSummary(BaseSchema):
    """Minimal event fields shown alongside a ticket."""

    event_id: int
    title: str
    starts_at: datetime
    venue: str


class ReceiptResponse(BaseSchema):
    transaction_id: str
    payment_date: datetime
    payment_method: str


class TicketResponse(BaseSchema):
    """Schema for ticket response."""

    ticket_id: int
    event_id: int
    user_id: int
    ticket_number: str
    quantity: int
    total_amount: Decimal
    payment_status: PaymentStatus
    payment_method: str
    transaction_id: str | None = None
    paid_at: datetime | None = None
    card_last_four: str | None = None
    qr_code: str | None = None
    booked_at: datetime
    refunded_at: datetime | None = None


class TicketDetailResponse(TicketResponse):
    """Ticket joined with its event summary."""

    event: TicketEventSummary


class PurchaseResponse(BaseSchema):
    """Created ticket, event summary and payment receipt."""

    ticket: TicketResponse
    event: TicketEventSummary
    receipt: ReceiptResponse


class CancellationResponse(BaseSchema):
    """Result of cancelling a paid ticket."""

    ticket_id: int
    ticket_number: str
    payment_status: PaymentStatus
    refund_amount: Decimal
    message: str
