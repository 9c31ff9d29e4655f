"""Root conftest — shared test configuration and seeded database fixtures.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - Seed helpers commit before returning: the code under test opens its own sessions
    - load() reads through a fresh session so assertions never see a stale identity map

Design Decisions:
    - File-backed SQLite over :memory:: the orchestrator, side-effect workers and the
      test itself each hold separate connections, and concurrent-accept tests need
      real database locking between them
"""

import os
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

from assignflow.db.base import Base  # noqa: E402
from assignflow.infrastructure.database import DatabaseSessionManager  # noqa: E402
from assignflow.models import (  # noqa: E402
    Booking, Service, User, Worker, WorkerAssignment,
)

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'assignflow.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    return DatabaseSessionManager(engine=test_engine)


@dataclass
class Seeded:
    """Ids of one seeded assignment and everything around it."""
    assignment_id: uuid.UUID
    booking_id: uuid.UUID
    worker_id: uuid.UUID
    customer_id: uuid.UUID
    dispatcher_id: uuid.UUID | None
    service_id: uuid.UUID


@pytest.fixture
def seed(db_manager):
    """Factory: insert customer, worker, service, booking and one assignment.

    Pass worker_id to add another assignment for an already-seeded worker.
    """

    async def _seed(
        status: str = "assigned",
        booking_status: str = "pending",
        worker_id: uuid.UUID | None = None,
        quote_amount: float | None = None,
        service_price: float | None = 100.0,
        with_dispatcher: bool = True,
        with_stats: bool = True,
        scheduled_date: date | None = None,
        assigned_at: datetime | None = None,
        started_at: datetime | None = None,
        actual_start_time: datetime | None = None,
    ) -> Seeded:
        async with db_manager.transaction() as db:
            customer = User(
                name="Dana Customer",
                email="dana@example.com",
                phone="+15550001111",
                user_type="normal",
                wallet_balance=250.0,
            )
            db.add(customer)
            if worker_id is None:
                worker = User(
                    name="Sam Worker",
                    email="sam@example.com",
                    phone="+15550009999",
                    user_type="worker",
                )
                db.add(worker)
                await db.flush()
                worker_id = worker.id
                if with_stats:
                    db.add(Worker(user_id=worker_id))
            dispatcher = None
            if with_dispatcher:
                dispatcher = User(name="Ari Dispatch", user_type="admin")
                db.add(dispatcher)
            service = Service(
                name="Deep Cleaning", price_type="fixed", price=service_price,
            )
            db.add(service)
            await db.flush()

            booking = Booking(
                booking_reference=f"BK-{uuid.uuid4().hex[:10]}",
                user_id=customer.id,
                service_id=service.id,
                status=booking_status,
                payment_status="pending",
                booking_type="inquiry" if quote_amount is not None else "regular",
                scheduled_date=scheduled_date,
                address="12 Harbour Road",
                contact_person="Dana",
                contact_phone="+15550002222",
                quote_amount=quote_amount,
                actual_start_time=actual_start_time,
            )
            db.add(booking)
            await db.flush()

            assignment = WorkerAssignment(
                booking_id=booking.id,
                worker_id=worker_id,
                assigned_by=dispatcher.id if dispatcher else None,
                status=status,
                assigned_at=assigned_at or T0,
                started_at=started_at,
                assignment_notes="Bring ladder",
            )
            db.add(assignment)
            await db.flush()

            return Seeded(
                assignment_id=assignment.id,
                booking_id=booking.id,
                worker_id=worker_id,
                customer_id=customer.id,
                dispatcher_id=dispatcher.id if dispatcher else None,
                service_id=service.id,
            )

    return _seed


@pytest.fixture
def load(db_manager):
    """Read one row by primary key through a fresh session."""

    async def _load(model, pk):
        async with db_manager.session() as db:
            return await db.get(model, pk)

    return _load
