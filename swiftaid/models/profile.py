"""Profile models - one table, one ORM class per role."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from swiftaid.db.base import Base


class Profile(Base):
    """Authenticated principal. Concrete rows are User, Driver or Admin."""

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    hashed_password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False)  # user | driver | admin
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __mapper_args__ = {
        "polymorphic_on": "role",
        "polymorphic_abstract": True,
    }


class User(Profile):
    """Member of the public who raises emergency requests."""

    __mapper_args__ = {"polymorphic_identity": "user"}


class Admin(Profile):
    """Dispatcher who assigns drivers to pending requests."""

    __mapper_args__ = {"polymorphic_identity": "admin"}


class Driver(Profile):
    """Ambulance driver. Only drivers carry availability bookkeeping."""

    # Single-table columns, so nullable at the database level
    vehicle_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    available: Mapped[bool] = mapped_column(Boolean, nullable=True, default=False)
    on_schedule: Mapped[bool] = mapped_column(Boolean, nullable=True, default=False)

    __mapper_args__ = {"polymorphic_identity": "driver"}

    @property
    def is_eligible(self) -> bool:
        """A driver can take a new job only when available and not already scheduled."""
        return bool(self.available) and not self.on_schedule
