"""Call Masking — SQL-backed CallMaskingGateway port.

Invariants:
    - enable() and disable() are idempotent; repeating either never raises
    - disable() on a booking that was never masked is a no-op
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select

from assignflow.infrastructure.database import DatabaseSessionManager
from assignflow.models.call_masking_session import CallMaskingSession


class SqlCallMaskingGateway:
    """Flips the per-booking masking flag read by the telephony bridge."""

    def __init__(self, db_manager: DatabaseSessionManager):
        self._db = db_manager

    async def enable(self, booking_id: UUID) -> None:
        await self._set(booking_id, True)

    async def disable(self, booking_id: UUID) -> None:
        await self._set(booking_id, False)

    async def is_enabled(self, booking_id: UUID) -> bool:
        async with self._db.session() as db:
            row = await _masking_for_booking(db, booking_id)
            return bool(row and row.enabled)

    async def _set(self, booking_id: UUID, enabled: bool) -> None:
        async with self._db.transaction() as db:
            row = await _masking_for_booking(db, booking_id)
            if row is None:
                if enabled:
                    db.add(CallMaskingSession(booking_id=booking_id, enabled=True))
                return
            if row.enabled != enabled:
                row.enabled = enabled
                row.updated_at = datetime.now(timezone.utc)


async def _masking_for_booking(db, booking_id: UUID) -> CallMaskingSession | None:
    result = await db.execute(
        select(CallMaskingSession).where(CallMaskingSession.booking_id == booking_id),
    )
    return result.scalar_one_or_none()
