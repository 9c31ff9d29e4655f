"""Side-Effect Dispatch — explicit routing from SideEffect kind to port call.

Invariants:
    - Every SideEffect has exactly one handler, visible in one dict
    - Handlers receive only the TransitionOutcome snapshot
    - dispatch() submits commands to the pool and returns immediately
    - Missing collaborators are a construction-time ConfigurationError

Design Decisions:
    - Explicit dict over getattr: adding a side effect requires editing this table
    - Worker stats live here rather than in a port: they share the core database
      but still run post-commit as best-effort bookkeeping
"""

import logging
from typing import Awaitable, Callable

from assignflow.core.domain_types import SideEffect
from assignflow.core.errors import ConfigurationError, SideEffectError, ErrorContext
from assignflow.core.repository_protocols import (
    CallMaskingGateway,
    ChatRoomManager,
    LocationTracker,
    NotificationDispatcher,
    RepositoryFactory,
)
from assignflow.core.transition_outcome import TransitionOutcome
from assignflow.infrastructure.database import DatabaseSessionManager
from assignflow.infrastructure.side_effect_pool import SideEffectCommand, SideEffectPool

logger = logging.getLogger(__name__)

Handler = Callable[[TransitionOutcome], Awaitable[object]]


class SideEffectDispatch:
    """Builds SideEffectCommands for a committed transition and submits them."""

    def __init__(
        self,
        pool: SideEffectPool | None,
        db_manager: DatabaseSessionManager | None,
        repositories: RepositoryFactory | None,
        chat_rooms: ChatRoomManager | None,
        call_masking: CallMaskingGateway | None,
        location_tracker: LocationTracker | None,
        notifier: NotificationDispatcher | None,
        chat_room_close_reason: str = "Service completed",
    ):
        missing = [
            name for name, value in (
                ("pool", pool),
                ("db_manager", db_manager),
                ("repositories", repositories),
                ("chat_rooms", chat_rooms),
                ("call_masking", call_masking),
                ("location_tracker", location_tracker),
                ("notifier", notifier),
            ) if value is None
        ]
        if missing:
            raise ConfigurationError(missing)

        self._pool = pool
        self._db = db_manager
        self._repos = repositories
        self._chat_rooms = chat_rooms
        self._call_masking = call_masking
        self._location = location_tracker
        self._notifier = notifier
        self._close_reason = chat_room_close_reason

        self._handlers: dict[SideEffect, Handler] = {
            SideEffect.CREATE_CHAT_ROOM: self._create_chat_room,
            SideEffect.CLOSE_CHAT_ROOM: self._close_chat_room,
            SideEffect.ENABLE_CALL_MASKING: self._enable_call_masking,
            SideEffect.DISABLE_CALL_MASKING: self._disable_call_masking,
            SideEffect.START_LOCATION_TRACKING: self._start_location_tracking,
            SideEffect.STOP_LOCATION_TRACKING: self._stop_location_tracking,
            SideEffect.INCREMENT_WORKER_STATS: self._increment_worker_stats,
            SideEffect.NOTIFY_WORKER_ASSIGNED: notifier.notify_worker_assigned,
            SideEffect.NOTIFY_ASSIGNMENT_ACCEPTED: notifier.notify_assignment_accepted,
            SideEffect.NOTIFY_ASSIGNMENT_REJECTED: notifier.notify_assignment_rejected,
            SideEffect.NOTIFY_WORKER_STARTED: notifier.notify_worker_started,
            SideEffect.NOTIFY_WORKER_COMPLETED: notifier.notify_worker_completed,
        }

    def dispatch(
        self, side_effects: tuple[SideEffect, ...], outcome: TransitionOutcome,
    ) -> int:
        """Submit one command per side effect. Returns how many were accepted."""
        accepted = 0
        for side_effect in side_effects:
            handler = self._handlers[side_effect]
            command = SideEffectCommand(
                side_effect=side_effect.value,
                operation=outcome.operation.value,
                assignment_id=str(outcome.assignment_id),
                booking_id=str(outcome.booking_id),
                run=_bind(handler, outcome),
            )
            if self._pool.submit(command):
                accepted += 1
        return accepted

    # ─── Handlers ────────────────────────────────────────────────

    async def _create_chat_room(self, outcome: TransitionOutcome) -> None:
        await self._chat_rooms.create_for_booking(outcome.booking_id)

    async def _close_chat_room(self, outcome: TransitionOutcome) -> None:
        await self._chat_rooms.close_for_booking(outcome.booking_id, self._close_reason)

    async def _enable_call_masking(self, outcome: TransitionOutcome) -> None:
        await self._call_masking.enable(outcome.booking_id)

    async def _disable_call_masking(self, outcome: TransitionOutcome) -> None:
        await self._call_masking.disable(outcome.booking_id)

    async def _start_location_tracking(self, outcome: TransitionOutcome) -> None:
        await self._location.start_tracking(outcome.worker_id, outcome.assignment_id)

    async def _stop_location_tracking(self, outcome: TransitionOutcome) -> None:
        await self._location.stop_tracking(outcome.worker_id, outcome.assignment_id)

    async def _increment_worker_stats(self, outcome: TransitionOutcome) -> None:
        """Best-effort: a failure here is earnings drift, reconciled outside the core."""
        earnings = outcome.earnings or 0.0
        async with self._db.transaction() as db:
            workers = self._repos.workers(db)
            worker = await workers.get_by_user_id(outcome.worker_id)
            if worker is None:
                raise SideEffectError(
                    SideEffect.INCREMENT_WORKER_STATS.value,
                    f"no worker profile for user {outcome.worker_id}",
                    ErrorContext(
                        assignment_id=str(outcome.assignment_id),
                        booking_id=str(outcome.booking_id),
                        operation=outcome.operation.value,
                    ),
                )
            await workers.increment_completed_job(worker.id, earnings)
        logger.info(
            f"Worker stats incremented: earnings={earnings:.2f}",
            extra=outcome.log_extra(),
        )


def _bind(handler: Handler, outcome: TransitionOutcome) -> Callable[[], Awaitable[object]]:
    async def run() -> object:
        return await handler(outcome)
    return run
