"""Booking ORM — the customer-facing work order paired with an assignment.

Invariants:
    - status: pending -> confirmed -> in_progress -> completed | cancelled
    - The orchestrator writes only status, actual_start_time, actual_end_time,
      actual_duration_minutes (see core.assignment_transitions.BOOKING_WRITABLE_FIELDS)
    - quote_amount overrides the service price for inquiry bookings

Design Decisions:
    - user and service eagerly loaded (selectin): the privacy projection needs both
      and lazy loads are not allowed under AsyncSession
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import String, Text, Integer, Float, Date, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from assignflow.db.base import Base


class Booking(Base):
    """Booking aggregate — shared with booking and payment subsystems."""
    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    booking_reference: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    service_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("services.id"), nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending",
    )
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="pending",
    )
    booking_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="regular",
    )
    completion_type: Mapped[str | None] = mapped_column(
        String(20), nullable=True,
    )

    # Scheduled window
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    scheduled_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    scheduled_end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    # Written by the assignment lifecycle
    actual_start_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    actual_end_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    actual_duration_minutes: Mapped[int | None] = mapped_column(
        Integer, nullable=True,
    )

    # Service details
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(200), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    special_instructions: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Inquiry quote
    quote_amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    quote_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    quote_provided_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    quote_accepted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship("User", lazy="selectin")
    service: Mapped["Service"] = relationship("Service", lazy="selectin")
