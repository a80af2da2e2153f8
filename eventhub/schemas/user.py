"""User schemas."""

from datetime import datetime
from decimal import Decimal

from eventhub.models.ticket import PaymentStatus
from eventhub.models.user import UserRole
from eventhub.schemas.common import BaseSchema


class UserResponse(BaseSchema):
    """Public view of a user; never carries the password hash."""

    user_id: int
    name: str
    email: str
    role: UserRole
    phone: str | None = None
    created_at: datetime


class TicketStatusTotals(BaseSchema):
    """Ticket quantity and amount for one payment status."""

    status: PaymentStatus
    total_tickets: int
    total_amount: Decimal


class TicketStats(BaseSchema):
    total_tickets: int
    by_status: list[TicketStatusTotals]


class UserProfileResponse(BaseSchema):
    """User with a rollup of the tickets they registered."""

    user: UserResponse
    ticket_stats: TicketStats
