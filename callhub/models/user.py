"""
User model - application accounts.

Accounts are created at registration and referenced by calls through their id.
"""
import enum
from typing import TYPE_CHECKING, List

from sqlalchemy import String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from callhub.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from callhub.models.call import CallParticipant


class UserRole(str, enum.Enum):
    """Enum for account roles."""
    USER = "user"
    ADMIN = "admin"


class User(Base, UUIDMixin, TimestampMixin):
    """
    User model - registered account.

    Stores the bcrypt password hash, never the plain password.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        doc="Lower-cased email address used for login"
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Display name"
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="bcrypt hash of the password"
    )

    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, name="user_role", native_enum=False),
        default=UserRole.USER,
        nullable=False,
        doc="Account role: user or admin"
    )

    # Relationships
    call_participations: Mapped[List["CallParticipant"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
