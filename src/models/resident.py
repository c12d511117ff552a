"""Resident ORM model."""

from datetime import date
from enum import Enum as PyEnum

from sqlalchemy import Boolean, Date, Enum, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel, SoftDeleteMixin


class ResidentStatus(PyEnum):
    """Enumeration for resident status."""

    ACTIVE = "active"
    HOSPITALIZED = "hospitalized"
    DISCHARGED = "discharged"
    DECEASED = "deceased"


class Resident(Base, BaseModel, SoftDeleteMixin):
    """
    Person living in the care home.

    Soft-deleted residents keep their row (deleted_at set) and can be restored.
    """

    __tablename__ = "residents"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    room_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    status: Mapped[ResidentStatus] = mapped_column(
        Enum(
            ResidentStatus,
            native_enum=False,
            values_callable=lambda members: [member.value for member in members],
        ),
        default=ResidentStatus.ACTIVE,
        nullable=False,
    )
    allergies: Mapped[str | None] = mapped_column(Text, nullable=True)
    dnr_status: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    care_plans: Mapped[list["CarePlan"]] = relationship(  # noqa: F821
        "CarePlan", back_populates="resident"
    )
    medications: Mapped[list["Medication"]] = relationship(  # noqa: F821
        "Medication", back_populates="resident"
    )

    __table_args__ = (Index("idx_residents_name", "last_name", "first_name"),)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Resident(id={self.id}, name={self.full_name}, status={self.status.value})>"


__all__ = ["Resident", "ResidentStatus"]
