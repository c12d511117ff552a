"""CarePlan ORM model."""

from datetime import date

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel, SoftDeleteMixin


class CarePlan(Base, BaseModel, SoftDeleteMixin):
    """Care plan for a resident (type: personal_care, nutrition, mobility, ...)."""

    __tablename__ = "care_plans"

    resident_id: Mapped[int] = mapped_column(ForeignKey("residents.id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="general")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    review_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    goals: Mapped[str | None] = mapped_column(Text, nullable=True)

    resident: Mapped["Resident"] = relationship(  # noqa: F821
        "Resident", back_populates="care_plans"
    )

    def __repr__(self) -> str:
        return f"<CarePlan(id={self.id}, title={self.title}, resident_id={self.resident_id})>"


__all__ = ["CarePlan"]
