"""Agency ORM model for external staffing agencies."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models import Base, BaseModel


class Agency(Base, BaseModel):
    """Staffing agency supplying temporary carers."""

    __tablename__ = "agencies"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Agency(id={self.id}, name={self.name}, is_active={self.is_active})>"


__all__ = ["Agency"]
