"""User service."""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.errors import ForbiddenError, NotFoundError
from eventhub.models.ticket import Ticket
from eventhub.models.user import User
from eventhub.services.ticket_service import TicketService


class UserService:
    """Service for user profile and history operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _ensure_can_view(self, requester: User, user_id: int) -> None:
        if not requester.is_admin and requester.user_id != user_id:
            raise ForbiddenError("Not authorized to access this user")

    async def get_user(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User", user_id)
        return user

    async def get_profile(self, requester: User, user_id: int) -> dict:
        """
        Get a user with ticket totals per payment status.

        Raises:
            ForbiddenError: If requester is neither the user nor an admin
            NotFoundError: If the user does not exist
        """
        self._ensure_can_view(requester, user_id)
        user = await self.get_user(user_id)

        result = await self.db.execute(
            select(
                Ticket.payment_status,
                func.sum(Ticket.quantity).label("total_tickets"),
                func.sum(Ticket.total_amount).label("total_amount"),
            )
            .where(Ticket.user_id == user_id)
            .group_by(Ticket.payment_status)
        )
        by_status = [
            {
                "status": row.payment_status,
                "total_tickets": int(row.total_tickets or 0),
                "total_amount": Decimal(row.total_amount or 0),
            }
            for row in result
        ]

        return {
            "user": user,
            "ticket_stats": {
                "total_tickets": sum(s["total_tickets"] for s in by_status),
                "by_status": by_status,
            },
        }

    async def get_booking_history(
        self,
        requester: User,
        user_id: int,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[list[Ticket], int]:
        """All tickets of a user, newest first."""
        self._ensure_can_view(requester, user_id)
        await self.get_user(user_id)
        return await TicketService(self.db).list_user_tickets(
            user_id, page=page, page_size=page_size
        )

    async def search_by_email(
        self,
        email: str,
        page: int = 1,
        page_size: int = 10,
    ) -> list[User]:
        """Users whose email contains the given fragment."""
        result = await self.db.execute(
            select(User)
            .where(User.email.ilike(f"%{email}%"))
            .order_by(User.email)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(result.scalars().all())
