"""Assignment Orchestrator — runs worker lifecycle transitions and their side effects.

Invariants:
    - Order on every mutation: load -> ownership -> state -> plan -> write -> commit -> dispatch
    - Assignment and Booking writes share one transaction; any failure rolls back both
    - The assignment write is a compare-and-swap on status: a concurrent winner turns
      the loser into InvalidStateTransitionError with nothing written
    - Side effects are submitted only after commit and never awaited
    - Query operations apply the same ownership check as mutations

Design Decisions:
    - Collaborators constructor-injected; missing ones raise ConfigurationError at
      construction, never a runtime None check
    - Clock injected: durations are testable without sleeping
    - Rows re-read with populate_existing inside the transaction so the returned
      assignment reflects the committed values
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Callable, Iterable
from uuid import UUID

from assignflow.core.assignment_transitions import (
    TransitionInput,
    TransitionPlan,
    check_ownership,
    check_transition,
    compute_earnings,
    plan_transition,
)
from assignflow.core.domain_types import Operation
from assignflow.core.errors import (
    ConfigurationError,
    ErrorContext,
    InvalidPaginationError,
    InvalidStateTransitionError,
    ResourceNotFoundError,
)
from assignflow.core.privacy_projection import project_assignment
from assignflow.core.transition_outcome import TransitionOutcome
from assignflow.core.repository_protocols import RepositoryFactory
from assignflow.infrastructure.database import DatabaseSessionManager
from assignflow.models.booking import Booking
from assignflow.models.worker_assignment import WorkerAssignment
from assignflow.schemas.assignment import AssignmentListResponse, Pagination
from assignflow.services.side_effect_dispatch import SideEffectDispatch

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AssignmentOrchestrator:
    """Accept / Reject / Start / Complete plus worker-scoped queries."""

    def __init__(
        self,
        db_manager: DatabaseSessionManager | None,
        repositories: RepositoryFactory | None,
        side_effects: SideEffectDispatch | None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        missing = [
            name for name, value in (
                ("db_manager", db_manager),
                ("repositories", repositories),
                ("side_effects", side_effects),
            ) if value is None
        ]
        if missing:
            raise ConfigurationError(missing)
        self._db = db_manager
        self._repos = repositories
        self._side_effects = side_effects
        self._clock = clock

    # ─── Mutations ───────────────────────────────────────────────

    async def accept(
        self, assignment_id: UUID, worker_id: UUID, notes: str = "",
    ) -> WorkerAssignment:
        return await self._transition(
            Operation.ACCEPT, assignment_id, worker_id, TransitionInput(notes=notes),
        )

    async def reject(
        self, assignment_id: UUID, worker_id: UUID, reason: str, notes: str = "",
    ) -> WorkerAssignment:
        return await self._transition(
            Operation.REJECT, assignment_id, worker_id,
            TransitionInput(notes=notes, reason=reason),
        )

    async def start(
        self, assignment_id: UUID, worker_id: UUID, notes: str = "",
    ) -> WorkerAssignment:
        return await self._transition(
            Operation.START, assignment_id, worker_id, TransitionInput(notes=notes),
        )

    async def complete(
        self,
        assignment_id: UUID,
        worker_id: UUID,
        notes: str = "",
        materials_used: Iterable[str] = (),
        photos: Iterable[str] = (),
    ) -> WorkerAssignment:
        return await self._transition(
            Operation.COMPLETE, assignment_id, worker_id,
            TransitionInput(
                notes=notes,
                materials_used=tuple(materials_used),
                photos=tuple(photos),
            ),
        )

    # ─── Queries ─────────────────────────────────────────────────

    async def get(self, assignment_id: UUID, worker_id: UUID) -> WorkerAssignment:
        context = ErrorContext(assignment_id=str(assignment_id), operation="get")
        async with self._db.session() as db:
            assignment = await self._repos.assignments(db).get_by_id(assignment_id)
        if assignment is None:
            raise ResourceNotFoundError("Assignment", str(assignment_id), context)
        check_ownership(assignment.id, assignment.worker_id, worker_id, context)
        return assignment

    async def list_for_worker(
        self,
        worker_id: UUID,
        status: str | None = None,
        scheduled_date: date | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> AssignmentListResponse:
        """Newest-assigned first, privacy-projected, scoped to the calling worker."""
        if page < 1 or limit < 1:
            raise InvalidPaginationError(
                page, limit, ErrorContext(operation="list_for_worker"),
            )
        async with self._db.session() as db:
            rows, total = await self._repos.assignments(db).list_for_worker(
                worker_id, status, scheduled_date, page, limit,
            )
            assignments = [project_assignment(row) for row in rows]
        return AssignmentListResponse(
            assignments=assignments,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=math.ceil(total / limit),
            ),
        )

    # ─── Transition core ─────────────────────────────────────────

    async def _transition(
        self,
        operation: Operation,
        assignment_id: UUID,
        worker_id: UUID,
        payload: TransitionInput,
    ) -> WorkerAssignment:
        context = ErrorContext(
            assignment_id=str(assignment_id), operation=operation.value,
        )
        async with self._db.transaction() as db:
            assignments = self._repos.assignments(db)
            bookings = self._repos.bookings(db)

            assignment = await assignments.get_by_id(assignment_id)
            if assignment is None:
                raise ResourceNotFoundError("Assignment", str(assignment_id), context)
            check_ownership(assignment.id, assignment.worker_id, worker_id, context)
            check_transition(operation, assignment.status, context)

            context.booking_id = str(assignment.booking_id)
            booking = await bookings.get_by_id(assignment.booking_id)
            if booking is None:
                raise ResourceNotFoundError("Booking", str(assignment.booking_id), context)

            plan = plan_transition(
                operation,
                assignment.status,
                self._clock(),
                payload,
                actual_start_time=booking.actual_start_time or assignment.started_at,
                context=context,
            )
            swapped = await assignments.compare_and_set_status(
                assignment.id, plan.rule.from_status.value, plan.assignment_changes,
            )
            if not swapped:
                current = await assignments.get_by_id(assignment.id)
                raise InvalidStateTransitionError(
                    operation.value,
                    current.status if current else "unknown",
                    context,
                )
            await bookings.update_lifecycle(booking.id, plan.booking_changes)

            booking = await bookings.get_by_id(booking.id)
            assignment = await assignments.get_by_id(assignment.id)
            outcome = _build_outcome(plan, assignment, booking, payload)

        logger.info(
            f"Assignment {plan.rule.to_status.value}",
            extra=outcome.log_extra(),
        )
        _log_completion_details(outcome)
        self._side_effects.dispatch(plan.rule.side_effects, outcome)
        return assignment


def _build_outcome(
    plan: TransitionPlan,
    assignment: WorkerAssignment,
    booking: Booking,
    payload: TransitionInput,
) -> TransitionOutcome:
    service = booking.service
    earnings = None
    if plan.rule.operation is Operation.COMPLETE:
        earnings = compute_earnings(
            booking.quote_amount, service.price if service else None,
        )
    return TransitionOutcome(
        operation=plan.rule.operation,
        assignment_id=assignment.id,
        booking_id=booking.id,
        booking_reference=booking.booking_reference,
        customer_id=booking.user_id,
        worker_id=assignment.worker_id,
        assigned_by=assignment.assigned_by,
        service_name=service.name if service else "",
        worker_name=assignment.worker.name if assignment.worker else "",
        occurred_at=plan.now,
        rejection_reason=payload.reason,
        earnings=earnings,
        materials_used=payload.materials_used,
        photos=payload.photos,
    )


def _log_completion_details(outcome: TransitionOutcome) -> None:
    # TODO: persist materials and photos once the job-report table exists
    if outcome.materials_used:
        logger.info(
            f"Materials used: {list(outcome.materials_used)}",
            extra=outcome.log_extra(),
        )
    if outcome.photos:
        logger.info(
            f"Photos uploaded: {list(outcome.photos)}",
            extra=outcome.log_extra(),
        )
