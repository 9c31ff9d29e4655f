"""Transition Outcome — immutable snapshot handed from a committed transition to side effects.

Invariants:
    - Built inside the committing transaction, read-only afterwards
    - Carries identifiers and display strings only (no ORM rows, no sessions)
    - earnings is set only for COMPLETE

Design Decisions:
    - Frozen dataclass: safe to share across concurrent side-effect workers
    - Display fields (service_name, worker_name) captured up front so notification
      adapters never reload rows that may have changed since commit
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from assignflow.core.domain_types import Operation


@dataclass(frozen=True)
class TransitionOutcome:
    """What happened, to which rows, as seen at commit time."""
    operation: Operation
    assignment_id: UUID
    booking_id: UUID
    booking_reference: str
    customer_id: UUID
    worker_id: UUID
    assigned_by: UUID | None
    service_name: str
    worker_name: str
    occurred_at: datetime
    rejection_reason: str = ""
    earnings: float | None = None
    materials_used: tuple[str, ...] = ()
    photos: tuple[str, ...] = ()

    def log_extra(self) -> dict:
        return {
            "assignment_id": str(self.assignment_id),
            "booking_id": str(self.booking_id),
            "worker_id": str(self.worker_id),
            "operation": self.operation.value,
        }
