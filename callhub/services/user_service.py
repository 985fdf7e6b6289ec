"""
User service for account business logic.
Handles registration, credential login and profile lookup.
"""
import logging
from typing import Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from callhub.config import settings
from callhub.core.exceptions import AuthError, NotFound, PersistenceError, ValidationError
from callhub.core.security import create_user_access_token, hash_password, verify_password
from callhub.models.user import User, UserRole
from callhub.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Service for user-related business logic."""

    def __init__(self, db: AsyncSession):
        """Initialize user service."""
        self.db = db
        self.user_repo = UserRepository(db)

    def _role_for_email(self, email: str) -> UserRole:
        """Accounts listed in ADMIN_EMAILS register as admins."""
        if email in settings.get_admin_emails_list():
            return UserRole.ADMIN
        return UserRole.USER

    async def register(self, name: str, email: str, password: str) -> Tuple[User, str]:
        """
        Register a new account and issue an access token.

        Args:
            name: Display name
            email: Email address (stored lower-cased)
            password: Plain password, stored as a bcrypt hash

        Returns:
            Tuple of (created user, access token)

        Raises:
            ValidationError: If the email is already registered
        """
        email = email.strip().lower()

        if await self.user_repo.get_by_email(email):
            raise ValidationError("User already exists with this email")

        try:
            user = await self.user_repo.create(
                name=name.strip(),
                email=email,
                password_hash=hash_password(password),
                role=self._role_for_email(email),
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ValidationError("User already exists with this email")
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to register user {email}: {e}") from e

        logger.info(f"Registered user {user.id} ({user.role.value})")
        return user, create_user_access_token(user.id, user.role)

    async def authenticate(self, email: str, password: str) -> Tuple[User, str]:
        """
        Check credentials and issue an access token.

        Returns:
            Tuple of (user, access token)

        Raises:
            AuthError: If the email is unknown or the password does not match
        """
        user = await self.user_repo.get_by_email(email)

        if user is None or not verify_password(password, user.password_hash):
            raise AuthError("Invalid email or password")

        return user, create_user_access_token(user.id, user.role)

    async def get_user(self, user_id: str) -> User:
        """
        Get an account by ID.

        Raises:
            NotFound: If the account does not exist
        """
        user = await self.user_repo.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user
