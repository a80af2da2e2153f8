"""API dependencies."""

from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.database import get_db
from eventhub.errors import AuthenticationError, ForbiddenError
from eventhub.models.user import User
from eventhub.payments import PaymentGateway, get_payment_gateway
from eventhub.redis_client import get_redis
from eventhub.services.auth_service import AuthService
from eventhub.services.availability_service import AvailabilityService
from eventhub.services.category_service import CategoryService
from eventhub.services.event_service import EventService
from eventhub.services.purchase_service import PurchaseService
from eventhub.services.report_service import ReportService
from eventhub.services.ticket_service import TicketService
from eventhub.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)

# Type aliases
DBSession = Annotated[AsyncSession, Depends(get_db)]
RedisClient = Annotated[redis.Redis, Depends(get_redis)]
Gateway = Annotated[PaymentGateway, Depends(get_payment_gateway)]


def get_auth_service(db: DBSession) -> AuthService:
    """Get auth service."""
    return AuthService(db)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


async def get_current_user(
    auth_service: AuthServiceDep,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> User:
    """Resolve the bearer token to the calling user."""
    if credentials is None:
        raise AuthenticationError("Not authorized to access this route")
    return await auth_service.resolve_token(credentials.credentials)


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_admin_user(current_user: CurrentUser) -> User:
    """Require the admin role."""
    if not current_user.is_admin:
        raise ForbiddenError(
            f"User role {current_user.role.value} is not authorized to access this route"
        )
    return current_user


AdminUser = Annotated[User, Depends(get_admin_user)]


def get_event_service(db: DBSession, redis_client: RedisClient) -> EventService:
    """Get event service."""
    return EventService(db, redis_client)


def get_category_service(db: DBSession) -> CategoryService:
    """Get category service."""
    return CategoryService(db)


def get_availability_service(db: DBSession) -> AvailabilityService:
    """Get availability service."""
    return AvailabilityService(db)


def get_purchase_service(
    db: DBSession,
    redis_client: RedisClient,
    gateway: Gateway,
) -> PurchaseService:
    """Get purchase service."""
    return PurchaseService(db, redis_client, gateway)


def get_ticket_service(
    db: DBSession,
    redis_client: RedisClient,
    gateway: Gateway,
) -> TicketService:
    """Get ticket service."""
    return TicketService(db, redis_client, gateway)


def get_user_service(db: DBSession) -> UserService:
    """Get user service."""
    return UserService(db)


def get_report_service(db: DBSession) -> ReportService:
    """Get report service."""
    return ReportService(db)


# Annotated dependencies
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
AvailabilityServiceDep = Annotated[AvailabilityService, Depends(get_availability_service)]
PurchaseServiceDep = Annotated[PurchaseService, Depends(get_purchase_service)]
TicketServiceDep = Annotated[TicketService, Depends(get_ticket_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]
