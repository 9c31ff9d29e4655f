"""Location Tracking — SQL-backed LocationTracker port.

Invariants:
    - start_tracking is a no-op when a session is already active
    - stop_tracking raises when there is no active session to stop
"""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select, update

from assignflow.core.domain_types import TrackingStatus
from assignflow.core.errors import ResourceNotFoundError
from assignflow.infrastructure.database import DatabaseSessionManager
from assignflow.models.location_tracking_session import LocationTrackingSession


class SqlLocationTracker:
    """Opens and closes live-location windows for in-progress jobs."""

    def __init__(self, db_manager: DatabaseSessionManager):
        self._db = db_manager

    async def start_tracking(self, worker_id: UUID, assignment_id: UUID) -> None:
        async with self._db.transaction() as db:
            active = await db.scalar(
                select(LocationTrackingSession.id).where(
                    LocationTrackingSession.worker_id == worker_id,
                    LocationTrackingSession.assignment_id == assignment_id,
                    LocationTrackingSession.status == TrackingStatus.ACTIVE.value,
                ),
            )
            if active is None:
                db.add(LocationTrackingSession(
                    worker_id=worker_id, assignment_id=assignment_id,
                ))

    async def stop_tracking(self, worker_id: UUID, assignment_id: UUID) -> None:
        async with self._db.transaction() as db:
            result = await db.execute(
                update(LocationTrackingSession)
                .where(
                    LocationTrackingSession.worker_id == worker_id,
                    LocationTrackingSession.assignment_id == assignment_id,
                    LocationTrackingSession.status == TrackingStatus.ACTIVE.value,
                )
                .values(
                    status=TrackingStatus.STOPPED.value,
                    stopped_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False),
            )
            if result.rowcount == 0:
                raise ResourceNotFoundError(
                    "LocationTrackingSession", str(assignment_id),
                )
