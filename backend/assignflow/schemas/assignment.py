"""Assignment Schemas — Pydantic models for worker-facing requests and responses.

Invariants:
    - CustomerView has no phone field and BookingView has no contact_phone field:
      the booking owner's number cannot be serialized to a worker
    - subscription and notification_settings are always None placeholders
    - Request notes/reasons are length-bounded and stripped

Design Decisions:
    - Separate *View models per relation instead of reusing ORM columns: the
      response shape is an allow-list, new columns never leak by default
    - status typed with AssignmentStatus: an unknown stored state fails loudly
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from assignflow.core.domain_types import AssignmentStatus


# --- Requests ----------------------------------------------------------------

class _NotesRequest(BaseModel):
    notes: str = Field("", max_length=2000)

    @field_validator("notes")
    @classmethod
    def strip_notes(cls, v: str) -> str:
        return v.strip()


class AcceptAssignmentRequest(_NotesRequest):
    """Worker accepts an assigned job."""


class RejectAssignmentRequest(_NotesRequest):
    """Worker declines an assigned job. A reason is required."""
    reason: str = Field(min_length=1, max_length=500)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("reason cannot be empty or whitespace")
        return v


class StartAssignmentRequest(_NotesRequest):
    """Worker arrives and starts work."""


class CompleteAssignmentRequest(_NotesRequest):
    """Worker finishes the job."""
    materials_used: list[str] = Field(default_factory=list, max_length=100)
    photos: list[str] = Field(default_factory=list, max_length=20)


# --- Responses ---------------------------------------------------------------

class CustomerView(BaseModel):
    """Booking owner as seen by a worker. No phone number by construction."""
    id: UUID
    name: str
    email: str | None = None
    user_type: str
    avatar: str | None = None
    gender: str | None = None
    is_active: bool
    last_login_at: datetime | None = None
    subscription_id: UUID | None = None
    subscription: None = None
    has_active_subscription: bool = False
    subscription_expiry_date: datetime | None = None
    notification_settings: None = None


class ServiceView(BaseModel):
    id: UUID
    name: str
    description: str | None = None
    price_type: str
    price: float | None = None
    duration: str | None = None


class WorkerView(BaseModel):
    """The calling worker's own profile."""
    id: UUID
    name: str
    email: str | None = None
    phone: str | None = None
    avatar: str | None = None


class DispatcherView(BaseModel):
    id: UUID
    name: str


class BookingView(BaseModel):
    id: UUID
    booking_reference: str
    user_id: UUID
    service_id: UUID
    status: str
    payment_status: str
    booking_type: str
    completion_type: str | None = None
    scheduled_date: date | None = None
    scheduled_time: datetime | None = None
    scheduled_end_time: datetime | None = None
    actual_start_time: datetime | None = None
    actual_end_time: datetime | None = None
    actual_duration_minutes: int | None = None
    address: str | None = None
    description: str | None = None
    contact_person: str | None = None
    special_instructions: str | None = None
    quote_amount: float | None = None
    quote_notes: str | None = None
    quote_provided_at: datetime | None = None
    quote_accepted_at: datetime | None = None
    user: CustomerView
    service: ServiceView


class AssignmentResponse(BaseModel):
    """Privacy-protected assignment returned to workers."""
    id: UUID
    booking_id: UUID
    worker_id: UUID
    assigned_by: UUID | None = None
    status: AssignmentStatus
    assigned_at: datetime
    accepted_at: datetime | None = None
    rejected_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    assignment_notes: str = ""
    acceptance_notes: str = ""
    rejection_notes: str = ""
    rejection_reason: str | None = None
    booking: BookingView
    worker: WorkerView
    assigned_by_user: DispatcherView | None = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class AssignmentListResponse(BaseModel):
    assignments: list[AssignmentResponse]
    pagination: Pagination
