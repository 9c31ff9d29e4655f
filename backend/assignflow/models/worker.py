"""Worker ORM — per-worker job statistics.

Invariants:
    - completed_jobs and total_earnings only increase
    - Written only through WorkerRepository.increment_completed_job (single UPDATE)

Design Decisions:
    - Separate from users: stats rows are hot under concurrent completions and
      should not contend with profile edits
"""

import uuid

from sqlalchemy import Integer, Float, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from assignflow.db.base import Base


class Worker(Base):
    """Worker statistics keyed by the worker's user account."""
    __tablename__ = "workers"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, unique=True,
    )
    completed_jobs: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    total_earnings: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0,
    )
