"""Chat Rooms — SQL-backed ChatRoomManager port.

Invariants:
    - One room per booking; accepting again after a reject reopens the same room
    - Closing an already-closed room is a no-op; closing a missing room raises
    - Every call runs in its own transaction (side effects outlive the request session)
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select

from assignflow.core.domain_types import ChatRoomStatus
from assignflow.core.errors import ResourceNotFoundError
from assignflow.infrastructure.database import DatabaseSessionManager
from assignflow.models.chat_room import ChatRoom

logger = logging.getLogger(__name__)


class SqlChatRoomManager:
    """Creates and closes booking chat rooms."""

    def __init__(self, db_manager: DatabaseSessionManager):
        self._db = db_manager

    async def create_for_booking(self, booking_id: UUID) -> UUID:
        async with self._db.transaction() as db:
            room = await _room_for_booking(db, booking_id)
            if room is None:
                room = ChatRoom(booking_id=booking_id)
                db.add(room)
                await db.flush()
                logger.info(
                    f"Chat room {room.id} created", extra={"booking_id": str(booking_id)},
                )
            elif room.status == ChatRoomStatus.CLOSED.value:
                room.status = ChatRoomStatus.OPEN.value
                room.closed_at = None
                room.closed_reason = None
                logger.info(
                    f"Chat room {room.id} reopened", extra={"booking_id": str(booking_id)},
                )
            return room.id

    async def close_for_booking(self, booking_id: UUID, reason: str) -> None:
        async with self._db.transaction() as db:
            room = await _room_for_booking(db, booking_id)
            if room is None:
                raise ResourceNotFoundError("ChatRoom", str(booking_id))
            if room.status == ChatRoomStatus.CLOSED.value:
                return
            room.status = ChatRoomStatus.CLOSED.value
            room.closed_reason = reason
            room.closed_at = datetime.now(timezone.utc)


async def _room_for_booking(db, booking_id: UUID) -> ChatRoom | None:
    result = await db.execute(
        select(ChatRoom).where(ChatRoom.booking_id == booking_id),
    )
    return result.scalar_one_or_none()
