"""User ORM model for staff accounts that sign in to the care-home app."""

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models import Base, BaseModel


class User(Base, BaseModel):
    """
    Staff account.

    Credential columns (password, remember_token, two_factor_secret,
    two_factor_recovery_codes) are stored here but never leave the table
    through the audit trail.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False, comment="Full name")
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, comment="Login identifier"
    )
    password: Mapped[str] = mapped_column(
        String(255), nullable=False, comment="Password hash"
    )
    remember_token: Mapped[str | None] = mapped_column(
        String(100), nullable=True, comment="Persistent session token"
    )
    two_factor_secret: Mapped[str | None] = mapped_column(Text, nullable=True)
    two_factor_recovery_codes: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        comment="Inactive users cannot sign in",
    )

    __table_args__ = (
        Index("idx_users_email", "email", unique=True),
        Index("idx_users_is_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name}, email={self.email}, is_active={self.is_active})>"


__all__ = ["User"]
