"""Lifecycle with SQL ports — side effects land in their own tables.

Invariants:
    - Accept opens a chat room, enables call masking, notifies customer and worker
    - Start opens a location tracking session
    - Complete closes the room, disables masking, stops tracking, credits the worker
    - Reject notifies the dispatcher; disabling masking that was never enabled is harmless
"""

import pytest
from sqlalchemy import select

from assignflow.models import (
    CallMaskingSession, ChatRoom, LocationTrackingSession, Notification, Worker,
)
from assignflow.services.wiring import build_orchestrator


@pytest.fixture
def sql_orchestrator(db_manager, side_effect_pool):
    return build_orchestrator(db_manager, side_effect_pool)


async def _all(db_manager, model, *where):
    async with db_manager.session() as db:
        result = await db.execute(select(model).where(*where))
        return list(result.scalars().all())


async def test_accept_opens_room_and_masking(
    sql_orchestrator, seed, db_manager, side_effect_pool,
):
    seeded = await seed()

    await sql_orchestrator.accept(seeded.assignment_id, seeded.worker_id)
    await side_effect_pool.drain()

    [room] = await _all(db_manager, ChatRoom, ChatRoom.booking_id == seeded.booking_id)
    assert room.status == "open"
    [masking] = await _all(
        db_manager, CallMaskingSession,
        CallMaskingSession.booking_id == seeded.booking_id,
    )
    assert masking.enabled is True
    to_customer = await _all(
        db_manager, Notification, Notification.recipient_id == seeded.customer_id,
    )
    assert sorted(n.kind for n in to_customer) == [
        "assignment_accepted", "worker_assigned",
    ]
    [to_worker] = await _all(
        db_manager, Notification, Notification.recipient_id == seeded.worker_id,
    )
    assert to_worker.kind == "new_assignment"
    assert to_worker.payload["assignment_id"] == str(seeded.assignment_id)
    assert side_effect_pool.failures == 0


async def test_full_lifecycle_tears_down_side_effects(
    sql_orchestrator, seed, db_manager, side_effect_pool,
):
    seeded = await seed(quote_amount=140.0)

    await sql_orchestrator.accept(seeded.assignment_id, seeded.worker_id)
    await side_effect_pool.drain()
    await sql_orchestrator.start(seeded.assignment_id, seeded.worker_id)
    await side_effect_pool.drain()
    [tracking] = await _all(
        db_manager, LocationTrackingSession,
        LocationTrackingSession.assignment_id == seeded.assignment_id,
    )
    assert tracking.status == "active"

    await sql_orchestrator.complete(seeded.assignment_id, seeded.worker_id)
    await side_effect_pool.drain()

    [room] = await _all(db_manager, ChatRoom, ChatRoom.booking_id == seeded.booking_id)
    assert room.status == "closed"
    assert room.closed_reason == "Service completed"
    [masking] = await _all(
        db_manager, CallMaskingSession,
        CallMaskingSession.booking_id == seeded.booking_id,
    )
    assert masking.enabled is False
    [tracking] = await _all(
        db_manager, LocationTrackingSession,
        LocationTrackingSession.assignment_id == seeded.assignment_id,
    )
    assert tracking.status == "stopped"
    assert tracking.stopped_at is not None
    [stats] = await _all(db_manager, Worker, Worker.user_id == seeded.worker_id)
    assert stats.completed_jobs == 1
    assert stats.total_earnings == 140.0
    kinds = [
        n.kind for n in await _all(
            db_manager, Notification, Notification.recipient_id == seeded.customer_id,
        )
    ]
    assert "worker_started" in kinds
    assert "worker_completed" in kinds
    assert side_effect_pool.failures == 0


async def test_reject_notifies_dispatcher_only(
    sql_orchestrator, seed, db_manager, side_effect_pool,
):
    seeded = await seed()

    await sql_orchestrator.reject(
        seeded.assignment_id, seeded.worker_id, reason="Double booked",
    )
    await side_effect_pool.drain()

    [notification] = await _all(db_manager, Notification)
    assert notification.recipient_id == seeded.dispatcher_id
    assert notification.kind == "assignment_rejected"
    assert "Double booked" in notification.body
    assert await _all(db_manager, CallMaskingSession) == []
    assert side_effect_pool.failures == 0


async def test_complete_without_tracking_session_is_logged_not_raised(
    sql_orchestrator, seed, side_effect_pool,
):
    seeded = await seed(status="in_progress", booking_status="in_progress")

    result = await sql_orchestrator.complete(seeded.assignment_id, seeded.worker_id)
    await side_effect_pool.drain()

    assert result.status == "completed"
    # No chat room and no tracking session were ever opened
    assert side_effect_pool.failures == 2
