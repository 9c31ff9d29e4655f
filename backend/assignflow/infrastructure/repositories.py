"""SQL Repositories — async SQLAlchemy implementations of the persistence Protocols.

Invariants:
    - Repositories never commit: the caller's transaction() owns the boundary
    - compare_and_set_status is a single UPDATE ... WHERE status = :expected;
      False means another writer got there first and nothing was written
    - update_lifecycle writes only BOOKING_WRITABLE_FIELDS
    - increment_completed_job is one UPDATE with column arithmetic (no read-modify-write)

Design Decisions:
    - Core UPDATE statements with synchronize_session=False: the identity map is
      refreshed explicitly via get_by_id(populate_existing) when rows are re-read
    - Listing joins bookings only when a scheduled-date filter is given
"""

from datetime import date
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from assignflow.core.assignment_transitions import check_booking_fields_writable
from assignflow.core.errors import DatabaseError
from assignflow.models.booking import Booking
from assignflow.models.worker import Worker
from assignflow.models.worker_assignment import WorkerAssignment


class SqlAssignmentRepository:
    """Assignment persistence bound to one AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, assignment_id: UUID) -> WorkerAssignment | None:
        result = await self.db.execute(
            select(WorkerAssignment)
            .where(WorkerAssignment.id == assignment_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def compare_and_set_status(
        self, assignment_id: UUID, expected_status: str, values: dict,
    ) -> bool:
        """Apply values only if the row still has expected_status."""
        result = await self.db.execute(
            update(WorkerAssignment)
            .where(
                WorkerAssignment.id == assignment_id,
                WorkerAssignment.status == expected_status,
            )
            .values(**values)
            .execution_options(synchronize_session=False),
        )
        return result.rowcount == 1

    async def list_for_worker(
        self,
        worker_id: UUID,
        status: str | None = None,
        scheduled_date: date | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[WorkerAssignment], int]:
        """Newest-assigned first. Returns (page rows, total matching rows)."""
        query = select(WorkerAssignment).where(
            WorkerAssignment.worker_id == worker_id,
        )
        if status:
            query = query.where(WorkerAssignment.status == status)
        if scheduled_date:
            query = query.join(
                Booking, Booking.id == WorkerAssignment.booking_id,
            ).where(Booking.scheduled_date == scheduled_date)

        total = await self.db.scalar(
            select(func.count()).select_from(query.subquery()),
        )
        result = await self.db.execute(
            query.order_by(WorkerAssignment.assigned_at.desc())
            .limit(limit)
            .offset((page - 1) * limit),
        )
        return list(result.scalars().all()), int(total or 0)


class SqlBookingRepository:
    """Booking persistence restricted to lifecycle columns."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, booking_id: UUID) -> Booking | None:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True),
        )
        return result.scalar_one_or_none()

    async def update_lifecycle(self, booking_id: UUID, values: dict) -> None:
        check_booking_fields_writable(values)
        result = await self.db.execute(
            update(Booking)
            .where(Booking.id == booking_id)
            .values(**values)
            .execution_options(synchronize_session=False),
        )
        if result.rowcount != 1:
            raise DatabaseError(
                f"booking {booking_id} matched {result.rowcount} rows", "update",
            )


class SqlWorkerRepository:
    """Worker statistics persistence."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_user_id(self, user_id: UUID) -> Worker | None:
        result = await self.db.execute(
            select(Worker).where(Worker.user_id == user_id),
        )
        return result.scalar_one_or_none()

    async def increment_completed_job(
        self, worker_id: UUID, earnings: float,
    ) -> None:
        result = await self.db.execute(
            update(Worker)
            .where(Worker.id == worker_id)
            .values(
                completed_jobs=Worker.completed_jobs + 1,
                total_earnings=Worker.total_earnings + earnings,
            )
            .execution_options(synchronize_session=False),
        )
        if result.rowcount != 1:
            raise DatabaseError(f"worker {worker_id} not found", "update")


class SqlRepositoryFactory:
    """RepositoryFactory backed by the SQL repositories above."""

    def assignments(self, session: AsyncSession) -> SqlAssignmentRepository:
        return SqlAssignmentRepository(session)

    def bookings(self, session: AsyncSession) -> SqlBookingRepository:
        return SqlBookingRepository(session)

    def workers(self, session: AsyncSession) -> SqlWorkerRepository:
        return SqlWorkerRepository(session)
