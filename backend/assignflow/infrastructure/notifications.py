"""Notifications — SQL-backed NotificationDispatcher writing in-app notifications.

Invariants:
    - Reads only the TransitionOutcome snapshot, never reloads rows
    - Each notify_* call writes all its rows in one transaction
    - Recipients: customer for assigned/accepted/started/completed, the worker for
      a new job, the dispatcher (assigned_by) for a rejection

Design Decisions:
    - Copy lives here as plain format strings: one place to change wording
    - A rejection with no dispatcher on record writes nothing (logged at warning)
"""

import logging
from uuid import UUID

from assignflow.core.domain_types import NotificationKind
from assignflow.core.transition_outcome import TransitionOutcome
from assignflow.infrastructure.database import DatabaseSessionManager
from assignflow.models.notification import Notification

logger = logging.getLogger(__name__)

_COPY = {
    NotificationKind.WORKER_ASSIGNED: (
        "Worker assigned",
        "{worker_name} will handle your {service_name} booking {booking_reference}.",
    ),
    NotificationKind.NEW_ASSIGNMENT: (
        "New job",
        "You accepted booking {booking_reference} for {service_name}.",
    ),
    NotificationKind.ASSIGNMENT_ACCEPTED: (
        "Assignment accepted",
        "{worker_name} accepted booking {booking_reference}.",
    ),
    NotificationKind.ASSIGNMENT_REJECTED: (
        "Assignment rejected",
        "{worker_name} rejected booking {booking_reference}: {rejection_reason}",
    ),
    NotificationKind.WORKER_STARTED: (
        "Work started",
        "{worker_name} started work on your {service_name} booking.",
    ),
    NotificationKind.WORKER_COMPLETED: (
        "Work completed",
        "{worker_name} completed your {service_name} booking {booking_reference}.",
    ),
}


class SqlNotificationDispatcher:
    """Writes in-app notifications for lifecycle transitions."""

    def __init__(self, db_manager: DatabaseSessionManager):
        self._db = db_manager

    async def notify_worker_assigned(self, outcome: TransitionOutcome) -> None:
        await self._send(outcome, [
            (outcome.customer_id, NotificationKind.WORKER_ASSIGNED),
            (outcome.worker_id, NotificationKind.NEW_ASSIGNMENT),
        ])

    async def notify_assignment_accepted(self, outcome: TransitionOutcome) -> None:
        await self._send(outcome, [
            (outcome.customer_id, NotificationKind.ASSIGNMENT_ACCEPTED),
        ])

    async def notify_assignment_rejected(self, outcome: TransitionOutcome) -> None:
        if outcome.assigned_by is None:
            logger.warning(
                "Rejection has no dispatcher to notify", extra=outcome.log_extra(),
            )
            return
        await self._send(outcome, [
            (outcome.assigned_by, NotificationKind.ASSIGNMENT_REJECTED),
        ])

    async def notify_worker_started(self, outcome: TransitionOutcome) -> None:
        await self._send(outcome, [
            (outcome.customer_id, NotificationKind.WORKER_STARTED),
        ])

    async def notify_worker_completed(self, outcome: TransitionOutcome) -> None:
        await self._send(outcome, [
            (outcome.customer_id, NotificationKind.WORKER_COMPLETED),
        ])

    async def _send(
        self, outcome: TransitionOutcome,
        recipients: list[tuple[UUID, NotificationKind]],
    ) -> None:
        async with self._db.transaction() as db:
            for recipient_id, kind in recipients:
                db.add(_build_notification(outcome, recipient_id, kind))


def _build_notification(
    outcome: TransitionOutcome, recipient_id: UUID, kind: NotificationKind,
) -> Notification:
    title, template = _COPY[kind]
    body = template.format(
        worker_name=outcome.worker_name,
        service_name=outcome.service_name,
        booking_reference=outcome.booking_reference,
        rejection_reason=outcome.rejection_reason or "no reason given",
    )
    return Notification(
        recipient_id=recipient_id,
        kind=kind.value,
        title=title,
        body=body,
        payload={
            "booking_id": str(outcome.booking_id),
            "assignment_id": str(outcome.assignment_id),
        },
    )
