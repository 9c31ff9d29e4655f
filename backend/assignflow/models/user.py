"""User ORM — customers, workers, and dispatch admins share one account table.

Invariants:
    - phone is private to the account holder; worker-facing projections never read it
    - subscription_id and notification_settings are references owned by other subsystems

Design Decisions:
    - user_type as plain string (normal/worker/admin): role logic lives outside this core
    - notification_settings as JSON: opaque to the assignment lifecycle
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Boolean, Float, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from assignflow.db.base import Base


class User(Base):
    """Account entity — referenced by bookings (customer) and assignments (worker, dispatcher)."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    user_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="normal",
    )
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    wallet_balance: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0,
    )
    subscription_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True,
    )
    has_active_subscription: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    subscription_expiry_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    notification_settings: Mapped[dict | None] = mapped_column(
        JSON, nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
