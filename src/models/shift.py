"""Shift ORM model for staff scheduling."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models import Base, BaseModel


class Shift(Base, BaseModel):
    """A scheduled shift for one staff member.

    Shifts have no name or title; audit summaries use display_label().
    """

    __tablename__ = "shifts"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    shift_date: Mapped[date] = mapped_column(Date, nullable=False)
    shift_type: Mapped[str] = mapped_column(
        String(20), nullable=False, comment="morning/afternoon/night"
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="scheduled")

    __table_args__ = (Index("idx_shift_user_date", "user_id", "shift_date"),)

    def display_label(self) -> str:
        return f"{self.shift_type.capitalize()} shift on {self.shift_date.isoformat()}"

    def __repr__(self) -> str:
        return f"<Shift(id={self.id}, user_id={self.user_id}, date={self.shift_date})>"


__all__ = ["Shift"]
