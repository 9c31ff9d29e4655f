"""Service ORM — catalog entry a booking is made against.

Invariants:
    - price is None for inquiry-type services (priced per booking via quote)

Design Decisions:
    - Catalog management is out of scope: this model is read-only for the orchestrator
"""

import uuid

from sqlalchemy import String, Text, Float, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from assignflow.db.base import Base


class Service(Base):
    """Service catalog entry."""
    __tablename__ = "services"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default="fixed",
    )
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    duration: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
