"""Services package."""

from eventhub.services.auth_service import AuthService
from eventhub.services.availability_service import Availability, AvailabilityService
from eventhub.services.category_service import CategoryService
from eventhub.services.event_service import EventService
from eventhub.services.purchase_service import PurchaseResult, PurchaseService
from eventhub.services.report_service import ReportService
from eventhub.services.ticket_service import TicketService
from eventhub.services.user_service import UserService

__all__ = [
    "AuthService",
    "Availability",
    "AvailabilityService",
    "CategoryService",
    "EventService",
    "PurchaseResult",
    "PurchaseService",
    "ReportService",
    "TicketService",
    "UserService",
]
