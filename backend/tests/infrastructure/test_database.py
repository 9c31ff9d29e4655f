"""Database Session Manager — error mapping and transaction rollback."""

import pytest
from sqlalchemy import text

from assignflow.core.errors import DatabaseError
from assignflow.infrastructure.database import DatabaseSessionManager
from assignflow.models import WorkerAssignment


async def test_sqlalchemy_errors_become_database_error(db_manager):
    with pytest.raises(DatabaseError) as exc:
        async with db_manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))

    assert exc.value.http_status == 503
    assert exc.value.code == "DATABASE_ERROR"


async def test_transaction_rolls_back_every_write(db_manager, seed, load):
    seeded = await seed()

    with pytest.raises(RuntimeError):
        async with db_manager.transaction() as db:
            assignment = await db.get(WorkerAssignment, seeded.assignment_id)
            assignment.status = "accepted"
            await db.flush()
            raise RuntimeError("fail after write")

    assignment = await load(WorkerAssignment, seeded.assignment_id)
    assert assignment.status == "assigned"


async def test_health_check_reports_connectivity(db_manager):
    assert await db_manager.health_check() is True


async def test_manager_wraps_a_given_engine(test_engine):
    manager = DatabaseSessionManager(engine=test_engine)

    assert manager.engine is test_engine
    assert await manager.health_check() is True


@pytest.mark.parametrize("kwargs", [
    {},
    {"database_url": "sqlite+aiosqlite:///other.db", "engine": "engine"},
])
def test_manager_needs_exactly_one_engine_source(kwargs):
    with pytest.raises(ValueError):
        DatabaseSessionManager(**kwargs)
