"""Medication ORM model."""

from datetime import date

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel, SoftDeleteMixin


class Medication(Base, BaseModel, SoftDeleteMixin):
    """Prescribed medication for a resident."""

    __tablename__ = "medications"

    resident_id: Mapped[int] = mapped_column(ForeignKey("residents.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    dosage: Mapped[str] = mapped_column(String(100), nullable=False)
    frequency: Mapped[str] = mapped_column(String(100), nullable=False)
    route: Mapped[str] = mapped_column(String(50), nullable=False, default="oral")
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)

    resident: Mapped["Resident"] = relationship(  # noqa: F821
        "Resident", back_populates="medications"
    )

    def __repr__(self) -> str:
        return f"<Medication(id={self.id}, name={self.name}, dosage={self.dosage})>"


__all__ = ["Medication"]
