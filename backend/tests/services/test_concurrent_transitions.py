"""Concurrent transitions — two callers racing on the same assignment.

Invariants:
    - Exactly one of two concurrent Accepts wins; the other sees InvalidStateTransitionError
    - Side effects are dispatched once, for the winner only
    - Accept racing Reject leaves the assignment in exactly one terminal choice
    - Concurrent completions for one worker each count once in worker stats
"""

import asyncio

from assignflow.core.errors import InvalidStateTransitionError
from assignflow.infrastructure.repositories import SqlWorkerRepository
from assignflow.models import Booking, WorkerAssignment


def _split(results):
    winners = [r for r in results if isinstance(r, WorkerAssignment)]
    losers = [r for r in results if isinstance(r, InvalidStateTransitionError)]
    return winners, losers


async def test_two_concurrent_accepts_yield_one_winner(
    orchestrator, seed, load, ports, side_effect_pool,
):
    seeded = await seed()

    results = await asyncio.gather(
        orchestrator.accept(seeded.assignment_id, seeded.worker_id, notes="first"),
        orchestrator.accept(seeded.assignment_id, seeded.worker_id, notes="second"),
        return_exceptions=True,
    )
    await side_effect_pool.drain()

    winners, losers = _split(results)
    assert len(winners) == 1
    assert len(losers) == 1
    assignment = await load(WorkerAssignment, seeded.assignment_id)
    assert assignment.status == "accepted"
    assert assignment.acceptance_notes == winners[0].acceptance_notes
    assert ports.names().count("create_for_booking") == 1


async def test_accept_racing_reject_commits_exactly_one(
    orchestrator, seed, load, side_effect_pool,
):
    seeded = await seed()

    results = await asyncio.gather(
        orchestrator.accept(seeded.assignment_id, seeded.worker_id),
        orchestrator.reject(seeded.assignment_id, seeded.worker_id, reason="Sick"),
        return_exceptions=True,
    )
    await side_effect_pool.drain()

    winners, losers = _split(results)
    assert len(winners) == 1
    assert len(losers) == 1
    assignment = await load(WorkerAssignment, seeded.assignment_id)
    assert assignment.status == winners[0].status
    assert (assignment.accepted_at is None) != (assignment.rejected_at is None)
    booking = await load(Booking, seeded.booking_id)
    assert booking.status == "confirmed"


async def test_concurrent_completions_for_one_worker_add_up(
    wide_orchestrator, seed, db_manager, ports, wide_pool,
):
    quotes = [10.0 + i for i in range(8)]
    first = await seed(
        status="in_progress", booking_status="in_progress", quote_amount=quotes[0],
    )
    seeded = [first] + [
        await seed(
            worker_id=first.worker_id, status="in_progress",
            booking_status="in_progress", quote_amount=quote,
        )
        for quote in quotes[1:]
    ]

    results = await asyncio.gather(*(
        wide_orchestrator.complete(s.assignment_id, first.worker_id) for s in seeded
    ))
    await wide_pool.drain()

    assert {r.status for r in results} == {"completed"}
    assert wide_pool.failures == 0
    async with db_manager.session() as db:
        stats = await SqlWorkerRepository(db).get_by_user_id(first.worker_id)
    assert stats.completed_jobs == len(quotes)
    assert stats.total_earnings == sum(quotes)
    assert ports.names().count("notify_worker_completed") == len(quotes)


async def test_accept_on_multi_worker_pool_runs_every_side_effect(
    wide_orchestrator, seed, ports, wide_pool,
):
    seeded = await seed()

    await wide_orchestrator.accept(seeded.assignment_id, seeded.worker_id)
    await wide_pool.drain()

    assert sorted(ports.names()) == [
        "create_for_booking",
        "enable",
        "notify_assignment_accepted",
        "notify_worker_assigned",
    ]
    assert wide_pool.failures == 0
