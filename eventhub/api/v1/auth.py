"""Authentication API endpoints."""

from fastapi import APIRouter, status

from eventhub.api.v1.dependencies import AuthServiceDep, CurrentUser
from eventhub.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from eventhub.schemas.user import UserResponse

router = APIRouter()


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
)
async def register(
    data: RegisterRequest,
    auth_service: AuthServiceDep,
) -> TokenResponse:
    """Register a new user with the user role and return a bearer token."""
    user = await auth_service.register(data)
    return TokenResponse(
        access_token=auth_service.issue_token(user),
        user=UserResponse.model_validate(user),
    )


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in",
)
async def login(
    data: LoginRequest,
    auth_service: AuthServiceDep,
) -> TokenResponse:
    user = await auth_service.authenticate(data.email, data.password)
    return TokenResponse(
        access_token=auth_service.issue_token(user),
        user=UserResponse.model_validate(user),
    )


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
async def me(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)
