"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - AssignmentId, BookingId, UserId, WorkerId wrap UUIDs — never use bare UUID in domain logic
    - UserId is the account id; WorkerId is the worker-stats row id (workers.id)
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: persist as plain strings and serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

AssignmentId = NewType("AssignmentId", UUID)
BookingId = NewType("BookingId", UUID)
UserId = NewType("UserId", UUID)
WorkerId = NewType("WorkerId", UUID)
ChatRoomId = NewType("ChatRoomId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class AssignmentStatus(str, Enum):
    """Assignment lifecycle states — maps to worker_assignments.status."""
    ASSIGNED = "assigned"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class BookingStatus(str, Enum):
    """Booking lifecycle states — maps to bookings.status."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Operation(str, Enum):
    """The four worker-initiated transitions."""
    ACCEPT = "accept"
    REJECT = "reject"
    START = "start"
    COMPLETE = "complete"


class SideEffect(str, Enum):
    """Best-effort follow-ups dispatched after a transition commits."""
    CREATE_CHAT_ROOM = "create_chat_room"
    CLOSE_CHAT_ROOM = "close_chat_room"
    ENABLE_CALL_MASKING = "enable_call_masking"
    DISABLE_CALL_MASKING = "disable_call_masking"
    START_LOCATION_TRACKING = "start_location_tracking"
    STOP_LOCATION_TRACKING = "stop_location_tracking"
    INCREMENT_WORKER_STATS = "increment_worker_stats"
    NOTIFY_WORKER_ASSIGNED = "notify_worker_assigned"
    NOTIFY_ASSIGNMENT_ACCEPTED = "notify_assignment_accepted"
    NOTIFY_ASSIGNMENT_REJECTED = "notify_assignment_rejected"
    NOTIFY_WORKER_STARTED = "notify_worker_started"
    NOTIFY_WORKER_COMPLETED = "notify_worker_completed"


class ChatRoomStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class TrackingStatus(str, Enum):
    ACTIVE = "active"
    STOPPED = "stopped"


class NotificationKind(str, Enum):
    """In-app notification types written by the SQL dispatcher."""
    WORKER_ASSIGNED = "worker_assigned"
    NEW_ASSIGNMENT = "new_assignment"
    ASSIGNMENT_ACCEPTED = "assignment_accepted"
    ASSIGNMENT_REJECTED = "assignment_rejected"
    WORKER_STARTED = "worker_started"
    WORKER_COMPLETED = "worker_completed"
