"""SQLAlchemy models."""

from eventhub.models.base import Base
from eventhub.models.category import Category
from eventhub.models.event import Event, EventStatus
from eventhub.models.ticket import PaymentStatus, Ticket
from eventhub.models.user import User, UserRole

__all__ = [
    "Base",
    "Category",
    "Event",
    "EventStatus",
    "Ticket",
    "PaymentStatus",
    "User",
    "UserRole",
]
