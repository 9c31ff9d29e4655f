"""Assignment Transitions — pure state machine for the worker/booking lifecycle.

Invariants:
    - Only four edges exist: assigned->accepted, assigned->rejected,
      accepted->in_progress, in_progress->completed. No reverse edges.
    - Ownership is checked before state, on every operation
    - Booking changes only ever touch BOOKING_WRITABLE_FIELDS
    - Duration is floor(minutes) and never negative
    - Earnings = quote_amount, else service price, else 0.0

Design Decisions:
    - Transition table as a frozen dict: every edge visible in one place
    - Functions return change dicts instead of mutating ORM rows: the shell applies
      them inside one transaction with a compare-and-swap on status
    - Time is a parameter: deterministic tests for durations
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType

from assignflow.core.domain_types import (
    AssignmentStatus, BookingStatus, Operation, SideEffect,
)
from assignflow.core.errors import (
    BookingFieldNotWritableError,
    ErrorContext,
    InvalidStateTransitionError,
    UnauthorizedError,
)


@dataclass(frozen=True)
class TransitionRule:
    """One edge of the assignment state machine and its paired booking status."""
    operation: Operation
    from_status: AssignmentStatus
    to_status: AssignmentStatus
    booking_status: BookingStatus
    side_effects: tuple[SideEffect, ...]


TRANSITIONS = MappingProxyType({
    Operation.ACCEPT: TransitionRule(
        Operation.ACCEPT,
        AssignmentStatus.ASSIGNED, AssignmentStatus.ACCEPTED,
        BookingStatus.CONFIRMED,
        (
            SideEffect.CREATE_CHAT_ROOM,
            SideEffect.ENABLE_CALL_MASKING,
            SideEffect.NOTIFY_WORKER_ASSIGNED,
            SideEffect.NOTIFY_ASSIGNMENT_ACCEPTED,
        ),
    ),
    # Booking goes back to confirmed so dispatch can reassign it
    Operation.REJECT: TransitionRule(
        Operation.REJECT,
        AssignmentStatus.ASSIGNED, AssignmentStatus.REJECTED,
        BookingStatus.CONFIRMED,
        (
            SideEffect.DISABLE_CALL_MASKING,
            SideEffect.NOTIFY_ASSIGNMENT_REJECTED,
        ),
    ),
    Operation.START: TransitionRule(
        Operation.START,
        AssignmentStatus.ACCEPTED, AssignmentStatus.IN_PROGRESS,
        BookingStatus.IN_PROGRESS,
        (
            SideEffect.START_LOCATION_TRACKING,
            SideEffect.NOTIFY_WORKER_STARTED,
        ),
    ),
    Operation.COMPLETE: TransitionRule(
        Operation.COMPLETE,
        AssignmentStatus.IN_PROGRESS, AssignmentStatus.COMPLETED,
        BookingStatus.COMPLETED,
        (
            SideEffect.DISABLE_CALL_MASKING,
            SideEffect.INCREMENT_WORKER_STATS,
            SideEffect.CLOSE_CHAT_ROOM,
            SideEffect.STOP_LOCATION_TRACKING,
            SideEffect.NOTIFY_WORKER_COMPLETED,
        ),
    ),
})

BOOKING_WRITABLE_FIELDS = frozenset({
    "status", "actual_start_time", "actual_end_time", "actual_duration_minutes",
})


@dataclass(frozen=True)
class TransitionInput:
    """Worker-supplied payload. Unused fields are ignored per operation."""
    notes: str = ""
    reason: str = ""
    materials_used: tuple[str, ...] = ()
    photos: tuple[str, ...] = ()


@dataclass(frozen=True)
class TransitionPlan:
    """Everything the shell needs to write for one transition."""
    rule: TransitionRule
    now: datetime
    assignment_changes: dict = field(default_factory=dict)
    booking_changes: dict = field(default_factory=dict)


def check_ownership(
    assignment_id: object,
    assignment_worker_id: object,
    caller_worker_id: object,
    context: ErrorContext | None = None,
) -> None:
    """Raise UnauthorizedError unless the caller is the assigned worker."""
    if assignment_worker_id != caller_worker_id:
        raise UnauthorizedError("Assignment", str(assignment_id), context)


def check_transition(
    operation: Operation, current_status: str,
    context: ErrorContext | None = None,
) -> TransitionRule:
    """Return the rule for operation, or raise if current_status is not its source."""
    rule = TRANSITIONS[operation]
    if current_status != rule.from_status.value:
        raise InvalidStateTransitionError(
            operation.value, str(current_status), context,
        )
    return rule


def plan_assignment_changes(
    rule: TransitionRule, now: datetime, payload: TransitionInput,
) -> dict:
    """Column values for the assignment row. Always includes the new status."""
    changes: dict = {"status": rule.to_status.value, "updated_at": now}
    if rule.operation is Operation.ACCEPT:
        changes["accepted_at"] = now
        changes["acceptance_notes"] = payload.notes
    elif rule.operation is Operation.REJECT:
        changes["rejected_at"] = now
        changes["rejection_reason"] = payload.reason
        changes["rejection_notes"] = payload.notes
    elif rule.operation is Operation.START:
        changes["started_at"] = now
    elif rule.operation is Operation.COMPLETE:
        changes["completed_at"] = now
    return changes


def plan_booking_changes(
    rule: TransitionRule, now: datetime,
    actual_start_time: datetime | None = None,
) -> dict:
    """Column values for the paired booking row."""
    changes: dict = {"status": rule.booking_status.value}
    if rule.operation is Operation.START:
        changes["actual_start_time"] = now
    elif rule.operation is Operation.COMPLETE:
        changes["actual_end_time"] = now
        if actual_start_time is not None:
            changes["actual_duration_minutes"] = compute_duration_minutes(
                actual_start_time, now,
            )
    check_booking_fields_writable(changes)
    return changes


def plan_transition(
    operation: Operation,
    current_status: str,
    now: datetime,
    payload: TransitionInput,
    actual_start_time: datetime | None = None,
    context: ErrorContext | None = None,
) -> TransitionPlan:
    """Validate the edge and compute both change sets. Ownership is checked separately."""
    rule = check_transition(operation, current_status, context)
    return TransitionPlan(
        rule=rule,
        now=now,
        assignment_changes=plan_assignment_changes(rule, now, payload),
        booking_changes=plan_booking_changes(rule, now, actual_start_time),
    )


def check_booking_fields_writable(changes: dict) -> None:
    forbidden = sorted(set(changes) - BOOKING_WRITABLE_FIELDS)
    if forbidden:
        raise BookingFieldNotWritableError(forbidden)


def compute_duration_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between start and end, floored, clamped at 0."""
    seconds = (as_utc(end) - as_utc(start)).total_seconds()
    return max(0, int(seconds // 60))


def compute_earnings(
    quote_amount: float | None, service_price: float | None,
) -> float:
    """Quote overrides list price; a job with neither still counts, at 0.0."""
    if quote_amount is not None:
        return float(quote_amount)
    if service_price is not None:
        return float(service_price)
    return 0.0


def as_utc(value: datetime) -> datetime:
    """Naive datetimes from the storage backend are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
