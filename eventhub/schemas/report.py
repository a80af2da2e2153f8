"""Reporting schemas."""

from decimal import Decimal

from eventhub.models.event import EventStatus
from eventhub.models.ticket import PaymentStatus
from eventhub.schemas.common import BaseSchema
from eventhub.schemas.ticket import TicketResponse


class EventRevenueItem(BaseSchema):
    """Paid tickets and revenue for one event."""

    event_id: int
    title: str
    tickets_sold: int
    revenue: Decimal


class PaymentStatusBreakdown(BaseSchema):
    status: PaymentStatus
    tickets: int
    amount: Decimal


class PaymentSummaryItem(BaseSchema):
    """All ticket payment states for one event."""

    event_id: int
    title: str
    payment_statuses: list[PaymentStatusBreakdown]
    total_tickets: int
    total_amount: Decimal


class EventStatusCount(BaseSchema):
    status: EventStatus
    count: int


class TopRegisteredItem(BaseSchema):
    """Event ranked by paid registrations."""

    event_id: int
    title: str
    capacity: int
    tickets_sold: int
    fill_rate: float


class DashboardOverview(BaseSchema):
    total_users: int
    total_events: int
    total_tickets: int
    total_revenue: Decimal


class DashboardResponse(BaseSchema):
    """Admin dashboard statistics."""

    overview: DashboardOverview
    events_by_status: list[EventStatusCount]
    recent_bookings: list[TicketResponse]
