"""Users API endpoints."""

from fastapi import APIRouter, Query

from eventhub.api.v1.dependencies import AdminUser, CurrentUser, UserServiceDep
from eventhub.api.v1.tickets import to_ticket_detail
from eventhub.schemas.common import PaginatedResponse
from eventhub.schemas.ticket import TicketDetailResponse
from eventhub.schemas.user import TicketStats, UserProfileResponse, UserResponse

router = APIRouter()


@router.get(
    "/search",
    response_model=list[UserResponse],
    summary="Search users by email",
)
async def search_users(
    admin: AdminUser,
    user_service: UserServiceDep,
    email: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
) -> list[UserResponse]:
    """Find users whose email contains the given text. Admin only."""
    users = await user_service.search_by_email(email, page=page, page_size=page_size)
    return [UserResponse.model_validate(u) for u in users]


@router.get(
    "/{user_id}/profile",
    response_model=UserProfileResponse,
    summary="Get user profile with ticket stats",
)
async def get_profile(
    user_id: int,
    current_user: CurrentUser,
    user_service: UserServiceDep,
) -> UserProfileResponse:
    """Profile of the caller, or of any user for admins."""
    profile = await user_service.get_profile(current_user, user_id)
    return UserProfileResponse(
        user=UserResponse.model_validate(profile["user"]),
        ticket_stats=TicketStats(**profile["ticket_stats"]),
    )


@router.get(
    "/{user_id}/booking-history",
    response_model=PaginatedResponse[TicketDetailResponse],
    summary="Get booking history",
)
async def get_booking_history(
    user_id: int,
    current_user: CurrentUser,
    user_service: UserServiceDep,
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
) -> PaginatedResponse[TicketDetailResponse]:
    tickets, total = await user_service.get_booking_history(
        current_user, user_id, page=page, page_size=page_size
    )
    return PaginatedResponse.of(
        [to_ticket_detail(t) for t in tickets],
        total=total,
        page=page,
        page_size=page_size,
    )
