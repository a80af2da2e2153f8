"""Read-only revenue and registration rollups."""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from eventhub.errors import NotFoundError
from eventhub.models.event import Event
from eventhub.models.ticket import PaymentStatus, Ticket
from eventhub.models.user import User


class ReportService:
    """Service for reporting queries over tickets and events."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_tickets_sold(self, event_id: int) -> dict:
        """Paid ticket count and revenue for one event."""
        if await self.db.get(Event, event_id) is None:
            raise NotFoundError("Event", event_id)

        result = await self.db.execute(
            select(
                func.coalesce(func.sum(Ticket.quantity), 0),
                func.coalesce(func.sum(Ticket.total_amount), 0),
            ).where(
                Ticket.event_id == event_id,
                Ticket.payment_status == PaymentStatus.PAID,
            )
        )
        sold, revenue = result.one()
        return {
            "event_id": event_id,
            "total_tickets_sold": int(sold),
            "total_revenue": Decimal(revenue),
        }

    async def get_revenue_by_event(self) -> list[dict]:
        """Paid tickets and revenue per event, highest revenue first."""
        revenue = func.sum(Ticket.total_amount).label("revenue")
        result = await self.db.execute(
            select(
                Event.event_id,
                Event.title,
                func.sum(Ticket.quantity).label("tickets_sold"),
                revenue,
            )
            .join(Ticket, Ticket.event_id == Event.event_id)
            .where(Ticket.payment_status == PaymentStatus.PAID)
            .group_by(Event.event_id, Event.title)
            .order_by(revenue.desc())
        )
        return [
            {
                "event_id": row.event_id,
                "title": row.title,
                "tickets_sold": int(row.tickets_sold or 0),
                "revenue": Decimal(row.revenue or 0),
            }
            for row in result
        ]

    async def get_payment_summary_by_event(self) -> list[dict]:
        """Ticket quantity and amount per payment status, grouped by event."""
        result = await self.db.execute(
            select(
                Event.event_id,
                Event.title,
                Ticket.payment_status,
                func.sum(Ticket.quantity).label("tickets"),
                func.sum(Ticket.total_amount).label("amount"),
            )
            .join(Ticket, Ticket.event_id == Event.event_id)
            .group_by(Event.event_id, Event.title, Ticket.payment_status)
        )

        summary: dict[int, dict] = {}
        for row in result:
            item = summary.setdefault(
                row.event_id,
                {
                    "event_id": row.event_id,
                    "title": row.title,
                    "payment_statuses": [],
                    "total_tickets": 0,
                    "total_amount": Decimal("0"),
                },
            )
            tickets = int(row.tickets or 0)
            amount = Decimal(row.amount or 0)
            item["payment_statuses"].append(
                {"status": row.payment_status, "tickets": tickets, "amount": amount}
            )
            item["total_tickets"] += tickets
            item["total_amount"] += amount

        return sorted(summary.values(), key=lambda i: i["total_amount"], reverse=True)

    async def count_events_by_status(self) -> list[dict]:
        result = await self.db.execute(
            select(Event.status, func.count(Event.event_id).label("count"))
            .group_by(Event.status)
        )
        return [{"status": row.status, "count": row.count} for row in result]

    async def get_top_registered(self, limit: int = 10) -> list[dict]:
        """Events ranked by paid registrations."""
        sold = func.coalesce(func.sum(Ticket.quantity), 0).label("tickets_sold")
        result = await self.db.execute(
            select(Event.event_id, Event.title, Event.capacity, sold)
            .join(Ticket, Ticket.event_id == Event.event_id)
            .where(Ticket.payment_status == PaymentStatus.PAID)
            .group_by(Event.event_id, Event.title, Event.capacity)
            .order_by(sold.desc())
            .limit(limit)
        )
        return [
            {
                "event_id": row.event_id,
                "title": row.title,
                "capacity": row.capacity,
                "tickets_sold": int(row.tickets_sold),
                "fill_rate": round(int(row.tickets_sold) / row.capacity, 4),
            }
            for row in result
        ]

    async def get_dashboard(self, recent_limit: int = 10) -> dict:
        """Overview counts, revenue, events per status and the latest bookings."""
        total_users = await self.db.scalar(select(func.count(User.user_id)))
        total_events = await self.db.scalar(select(func.count(Event.event_id)))
        total_tickets = await self.db.scalar(select(func.count(Ticket.ticket_id)))
        total_revenue = await self.db.scalar(
            select(func.coalesce(func.sum(Ticket.total_amount), 0)).where(
                Ticket.payment_status == PaymentStatus.PAID
            )
        )

        recent = await self.db.execute(
            select(Ticket)
            .options(selectinload(Ticket.event))
            .order_by(Ticket.booked_at.desc(), Ticket.ticket_id.desc())
            .limit(recent_limit)
        )

        return {
            "overview": {
                "total_users": int(total_users or 0),
                "total_events": int(total_events or 0),
                "total_tickets": int(total_tickets or 0),
                "total_revenue": Decimal(total_revenue or 0),
            },
            "events_by_status": await self.count_events_by_status(),
            "recent_bookings": list(recent.scalars().all()),
        }
