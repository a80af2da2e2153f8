"""Registration, login and bearer token resolution."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eventhub.errors import AuthenticationError, InvalidInputError
from eventhub.models.user import User, UserRole
from eventhub.schemas.auth import RegisterRequest
from eventhub.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


class AuthService:
    """Service for user credentials."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def register(
        self,
        data: RegisterRequest,
        role: UserRole = UserRole.USER,
    ) -> User:
        """
        Register a new user.

        Raises:
            InvalidInputError: If the email is already registered
        """
        if await self.get_user_by_email(data.email):
            raise InvalidInputError("User already exists with this email")

        user = User(
            name=data.name,
            email=data.email.lower(),
            password_hash=hash_password(data.password),
            role=role,
            phone=data.phone,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise InvalidInputError("User already exists with this email")
        await self.db.refresh(user)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """
        Check credentials.

        Raises:
            AuthenticationError: If the email or password is wrong
        """
        user = await self.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid email or password")
        return user

    def issue_token(self, user: User) -> str:
        return create_access_token(user.user_id, user.role.value)

    async def resolve_token(self, token: str) -> User:
        """
        Resolve a bearer token to its user.

        Raises:
            AuthenticationError: If the token is invalid or the user is gone
        """
        payload = decode_access_token(token)
        if payload is None or payload.get("sub") is None:
            raise AuthenticationError("Could not validate credentials")

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError):
            raise AuthenticationError("Could not validate credentials")

        user = await self.db.get(User, user_id)
        if user is None:
            raise AuthenticationError("User not found")
        return user

    async def ensure_admin(self, email: str, password: str) -> User:
        """Create the bootstrap admin account if it does not exist."""
        existing = await self.get_user_by_email(email)
        if existing:
            logger.info("Admin account already exists")
            return existing

        user = await self.register(
            RegisterRequest(name="System Administrator", email=email, password=password),
            role=UserRole.ADMIN,
        )
        logger.info(f"Admin account {email} created")
        return user
