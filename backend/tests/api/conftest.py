"""API test fixtures — httpx client against the FastAPI app with a test orchestrator.

Invariants:
    - app.state.orchestrator replaced for the test and restored afterwards
    - The lifespan does not run under ASGITransport: no real database is touched
"""

import pytest
from httpx import ASGITransport, AsyncClient

from assignflow.infrastructure.side_effect_pool import SideEffectPool
from assignflow.main import app
from assignflow.services.wiring import build_orchestrator


@pytest.fixture
async def side_effect_pool(test_engine):
    pool = SideEffectPool(workers=1, queue_size=100)
    pool.start()
    yield pool
    await pool.shutdown(timeout=1.0)


@pytest.fixture
async def client(db_manager, side_effect_pool):
    original = getattr(app.state, "orchestrator", None)
    app.state.orchestrator = build_orchestrator(db_manager, side_effect_pool)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.state.orchestrator = original
