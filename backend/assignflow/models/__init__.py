"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - WorkerAssignment and Booking are the two aggregates the orchestrator writes
    - User, Service are read-only here; port tables belong to their adapters

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from assignflow.models.user import User  # noqa: F401
from assignflow.models.service import Service  # noqa: F401
from assignflow.models.booking import Booking  # noqa: F401
from assignflow.models.worker_assignment import WorkerAssignment  # noqa: F401
from assignflow.models.worker import Worker  # noqa: F401
from assignflow.models.chat_room import ChatRoom  # noqa: F401
from assignflow.models.call_masking_session import CallMaskingSession  # noqa: F401
from assignflow.models.location_tracking_session import LocationTrackingSession  # noqa: F401
from assignflow.models.notification import Notification  # noqa: F401
