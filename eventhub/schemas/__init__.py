"""Pydantic schemas for API request/response."""

from eventhub.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from eventhub.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryWithCountResponse,
)
from eventhub.schemas.event import (
    AvailabilityResponse,
    EventCreate,
    EventDetailResponse,
    EventResponse,
    EventUpdate,
)
from eventhub.schemas.ticket import (
    CancellationResponse,
    PurchaseRequest,
    PurchaseResponse,
    TicketResponse,
)
from eventhub.schemas.user import UserProfileResponse, UserResponse

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "TokenResponse",
    "CategoryCreate",
    "CategoryResponse",
    "CategoryWithCountResponse",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "EventDetailResponse",
    "AvailabilityResponse",
    "PurchaseRequest",
    "PurchaseResponse",
    "TicketResponse",
    "CancellationResponse",
    "UserResponse",
    "UserProfileResponse",
]
