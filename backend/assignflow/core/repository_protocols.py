"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via constructor injection
    - Persistence is reached through a RepositoryFactory, so services never
      name a concrete repository class

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass plain recording fakes
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE these protocols are never async themselves
    - Side-effect ports receive a TransitionOutcome snapshot, never ORM rows:
      they run after the request's session is closed
"""

from datetime import date
from typing import Any, Protocol
from uuid import UUID

from assignflow.core.domain_types import (
    AssignmentId, BookingId, ChatRoomId, UserId, WorkerId,
)
from assignflow.core.transition_outcome import TransitionOutcome


# ─── Row shapes ──────────────────────────────────────────────────

class WorkerLike(Protocol):
    id: UUID
    user_id: UUID
    completed_jobs: int
    total_earnings: float


# ─── Persistence ─────────────────────────────────────────────────

class AssignmentRepository(Protocol):
    """Contract for assignment persistence — implemented by shell."""
    async def get_by_id(self, assignment_id: AssignmentId) -> Any | None: ...
    async def compare_and_set_status(
        self, assignment_id: AssignmentId, expected_status: str, values: dict,
    ) -> bool: ...
    async def list_for_worker(
        self,
        worker_id: UserId,
        status: str | None,
        scheduled_date: date | None,
        page: int,
        limit: int,
    ) -> tuple[list[Any], int]: ...


class BookingRepository(Protocol):
    """Contract for booking persistence — only lifecycle fields are writable."""
    async def get_by_id(self, booking_id: BookingId) -> Any | None: ...
    async def update_lifecycle(self, booking_id: BookingId, values: dict) -> None: ...


class WorkerRepository(Protocol):
    """Contract for worker statistics — increments are single atomic statements."""
    async def get_by_user_id(self, user_id: UserId) -> WorkerLike | None: ...
    async def increment_completed_job(
        self, worker_id: WorkerId, earnings: float,
    ) -> None: ...


class RepositoryFactory(Protocol):
    """Binds repositories to one open session; the caller owns the transaction."""
    def assignments(self, session: Any) -> AssignmentRepository: ...
    def bookings(self, session: Any) -> BookingRepository: ...
    def workers(self, session: Any) -> WorkerRepository: ...


# ─── Side-effect ports ───────────────────────────────────────────

class ChatRoomManager(Protocol):
    async def create_for_booking(self, booking_id: BookingId) -> ChatRoomId: ...
    async def close_for_booking(self, booking_id: BookingId, reason: str) -> None: ...


class CallMaskingGateway(Protocol):
    """Both calls are idempotent: repeating them never raises."""
    async def enable(self, booking_id: BookingId) -> None: ...
    async def disable(self, booking_id: BookingId) -> None: ...


class LocationTracker(Protocol):
    async def start_tracking(
        self, worker_id: UserId, assignment_id: AssignmentId,
    ) -> None: ...
    async def stop_tracking(
        self, worker_id: UserId, assignment_id: AssignmentId,
    ) -> None: ...


class NotificationDispatcher(Protocol):
    async def notify_worker_assigned(self, outcome: TransitionOutcome) -> None: ...
    async def notify_assignment_accepted(self, outcome: TransitionOutcome) -> None: ...
    async def notify_assignment_rejected(self, outcome: TransitionOutcome) -> None: ...
    async def notify_worker_started(self, outcome: TransitionOutcome) -> None: ...
    async def notify_worker_completed(self, outcome: TransitionOutcome) -> None: ...
