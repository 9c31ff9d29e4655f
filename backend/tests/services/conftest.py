"""Service test fixtures — orchestrator wired to recording ports and a live side-effect pool.

Invariants:
    - Side effects run on a real SideEffectPool; tests call drain() before asserting
    - RecordingPorts stands in for chat, call masking, location and notifications
    - Worker stats still go through the real SqlWorkerRepository
    - The clock is injected: durations are asserted without sleeping

Design Decisions:
    - One recording object implements every port: every call lands in a single
      list. Side effects carry no ordering guarantee, so tests compare names as
      sets or sorted lists and look calls up by name
    - The default pool runs one worker; multi-worker behaviour is covered with
      the wide_pool fixture at the production default of four
    - Failures injected per method name, raised as plain RuntimeError like a
      flaky remote service would
"""

from datetime import datetime, timedelta, timezone

import pytest

from assignflow.infrastructure.repositories import SqlRepositoryFactory
from assignflow.infrastructure.side_effect_pool import SideEffectPool
from assignflow.services.assignment_orchestrator import AssignmentOrchestrator
from assignflow.services.side_effect_dispatch import SideEffectDispatch


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingPorts:
    """Implements ChatRoomManager, CallMaskingGateway, LocationTracker and NotificationDispatcher."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.fail: set[str] = set()

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def call(self, name: str) -> tuple:
        """Arguments of the first call to name."""
        return next(call[1:] for call in self.calls if call[0] == name)

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail:
            raise RuntimeError(f"{name} unavailable")

    async def create_for_booking(self, booking_id):
        self._record("create_for_booking", booking_id)
        return booking_id

    async def close_for_booking(self, booking_id, reason):
        self._record("close_for_booking", booking_id, reason)

    async def enable(self, booking_id):
        self._record("enable", booking_id)

    async def disable(self, booking_id):
        self._record("disable", booking_id)

    async def start_tracking(self, worker_id, assignment_id):
        self._record("start_tracking", worker_id, assignment_id)

    async def stop_tracking(self, worker_id, assignment_id):
        self._record("stop_tracking", worker_id, assignment_id)

    async def notify_worker_assigned(self, outcome):
        self._record("notify_worker_assigned", outcome)

    async def notify_assignment_accepted(self, outcome):
        self._record("notify_assignment_accepted", outcome)

    async def notify_assignment_rejected(self, outcome):
        self._record("notify_assignment_rejected", outcome)

    async def notify_worker_started(self, outcome):
        self._record("notify_worker_started", outcome)

    async def notify_worker_completed(self, outcome):
        self._record("notify_worker_completed", outcome)


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def ports():
    return RecordingPorts()


@pytest.fixture
async def side_effect_pool(test_engine):
    """Depends on the engine so queued work finishes before the engine is disposed."""
    pool = SideEffectPool(workers=1, queue_size=100)
    pool.start()
    yield pool
    await pool.shutdown(timeout=1.0)


@pytest.fixture
def repositories():
    return SqlRepositoryFactory()


@pytest.fixture
def dispatch(side_effect_pool, db_manager, repositories, ports):
    return SideEffectDispatch(
        pool=side_effect_pool,
        db_manager=db_manager,
        repositories=repositories,
        chat_rooms=ports,
        call_masking=ports,
        location_tracker=ports,
        notifier=ports,
    )


@pytest.fixture
def orchestrator(db_manager, repositories, dispatch, clock):
    return AssignmentOrchestrator(db_manager, repositories, dispatch, clock=clock)


@pytest.fixture
async def wide_pool(test_engine):
    """Four workers, matching the production default."""
    pool = SideEffectPool(workers=4, queue_size=100)
    pool.start()
    yield pool
    await pool.shutdown(timeout=1.0)


@pytest.fixture
def wide_orchestrator(db_manager, repositories, wide_pool, ports, clock):
    dispatch = SideEffectDispatch(
        pool=wide_pool,
        db_manager=db_manager,
        repositories=repositories,
        chat_rooms=ports,
        call_masking=ports,
        location_tracker=ports,
        notifier=ports,
    )
    return AssignmentOrchestrator(db_manager, repositories, dispatch, clock=clock)
