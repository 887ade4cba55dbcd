"""Emergency request model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from swiftaid.db.base import Base
from swiftaid.models.chat_message import ChatMessage
from swiftaid.models.profile import Driver, Profile


class EmergencyRequest(Base):
    """Ambulance request raised by a user and worked by one driver."""

    __tablename__ = "emergency_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'assigned', 'in-progress', 'completed')",
            name="ck_emergency_requests_status",
        ),
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 5)",
            name="ck_emergency_requests_rating",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    requester_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    patient_name: Mapped[str] = mapped_column(String(255), nullable=False)
    patient_age: Mapped[str] = mapped_column(String(20), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    emergency_type: Mapped[str] = mapped_column(String(100), nullable=False)
    additional_info: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", index=True)
    driver_id: Mapped[int | None] = mapped_column(
        ForeignKey("profiles.id", ondelete="RESTRICT"), nullable=True, index=True
    )
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    assigned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    requester: Mapped[Profile] = relationship(Profile, foreign_keys=[requester_id])
    driver: Mapped[Driver | None] = relationship(Driver, foreign_keys=[driver_id])
    chat_history: Mapped[list[ChatMessage]] = relationship(
        ChatMessage,
        order_by=ChatMessage.id,
        lazy="selectin",
        cascade="all, delete-orphan",
    )
