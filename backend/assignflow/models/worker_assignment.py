"""WorkerAssignment ORM — binds one worker to one booking for a single job cycle.

Invariants:
    - status transitions: assigned -> accepted -> in_progress -> completed,
      or assigned -> rejected. Enforced by core.assignment_transitions.
    - At most one of accepted_at / rejected_at is set
    - started_at only after accepted_at; completed_at only after started_at
    - Never deleted by the orchestrator

Design Decisions:
    - worker_id references users.id (the worker's account), not workers.id
    - status is the compare-and-swap column: every write is
      UPDATE ... WHERE id = :id AND status = :expected
    - Composite index on (worker_id, assigned_at) backs the newest-first worker listing
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, Text, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from assignflow.db.base import Base


class WorkerAssignment(Base):
    """Assignment aggregate — owned exclusively by the orchestrator once created."""
    __tablename__ = "worker_assignments"
    __table_args__ = (
        Index("ix_worker_assignments_worker_assigned", "worker_id", "assigned_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    booking_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("bookings.id"), nullable=False,
    )
    worker_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    assigned_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="assigned",
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    accepted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    rejected_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    assignment_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    acceptance_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    rejection_notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    booking: Mapped["Booking"] = relationship("Booking", lazy="selectin")
    worker: Mapped["User"] = relationship(
        "User", foreign_keys=[worker_id], lazy="selectin",
    )
    assigned_by_user: Mapped[Optional["User"]] = relationship(
        "User", foreign_keys=[assigned_by], lazy="selectin",
    )
