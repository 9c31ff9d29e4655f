"""Privacy Projection — pure mapping from a loaded assignment to a worker-safe response.

Invariants:
    - Total over fully-loaded assignments: booking, booking.user, booking.service
      and worker must be present; a missing one raises MissingRelationError
    - The booking owner's phone (user.phone, booking.contact_phone) is never read
    - subscription / notification_settings references become None placeholders
    - No IO: relations must already be loaded (selectin) before calling

Design Decisions:
    - Field-by-field copy into *View models: an allow-list, so new ORM columns
      stay private until added here on purpose
    - assigned_by_user is optional: assignments created by automated dispatch have none
"""

from assignflow.core.errors import ErrorContext, MissingRelationError
from assignflow.schemas.assignment import (
    AssignmentResponse,
    BookingView,
    CustomerView,
    DispatcherView,
    ServiceView,
    WorkerView,
)


def project_assignment(assignment) -> AssignmentResponse:
    """Convert a WorkerAssignment (with relations) into its privacy-protected response."""
    booking = _require(assignment, "booking", assignment)
    customer = _require(booking, "user", assignment)
    service = _require(booking, "service", assignment)
    worker = _require(assignment, "worker", assignment)
    dispatcher = getattr(assignment, "assigned_by_user", None)

    return AssignmentResponse(
        id=assignment.id,
        booking_id=assignment.booking_id,
        worker_id=assignment.worker_id,
        assigned_by=assignment.assigned_by,
        status=assignment.status,
        assigned_at=assignment.assigned_at,
        accepted_at=assignment.accepted_at,
        rejected_at=assignment.rejected_at,
        started_at=assignment.started_at,
        completed_at=assignment.completed_at,
        assignment_notes=assignment.assignment_notes or "",
        acceptance_notes=assignment.acceptance_notes or "",
        rejection_notes=assignment.rejection_notes or "",
        rejection_reason=assignment.rejection_reason,
        booking=_project_booking(booking, customer, service),
        worker=WorkerView(
            id=worker.id,
            name=worker.name,
            email=worker.email,
            phone=worker.phone,
            avatar=worker.avatar,
        ),
        assigned_by_user=(
            DispatcherView(id=dispatcher.id, name=dispatcher.name)
            if dispatcher is not None else None
        ),
    )


def _project_booking(booking, customer, service) -> BookingView:
    return BookingView(
        id=booking.id,
        booking_reference=booking.booking_reference,
        user_id=booking.user_id,
        service_id=booking.service_id,
        status=booking.status,
        payment_status=booking.payment_status,
        booking_type=booking.booking_type,
        completion_type=booking.completion_type,
        scheduled_date=booking.scheduled_date,
        scheduled_time=booking.scheduled_time,
        scheduled_end_time=booking.scheduled_end_time,
        actual_start_time=booking.actual_start_time,
        actual_end_time=booking.actual_end_time,
        actual_duration_minutes=booking.actual_duration_minutes,
        address=booking.address,
        description=booking.description,
        contact_person=booking.contact_person,
        special_instructions=booking.special_instructions,
        quote_amount=booking.quote_amount,
        quote_notes=booking.quote_notes,
        quote_provided_at=booking.quote_provided_at,
        quote_accepted_at=booking.quote_accepted_at,
        user=_project_customer(customer),
        service=ServiceView(
            id=service.id,
            name=service.name,
            description=service.description,
            price_type=service.price_type,
            price=service.price,
            duration=service.duration,
        ),
    )


def _project_customer(customer) -> CustomerView:
    # Phone intentionally excluded
    return CustomerView(
        id=customer.id,
        name=customer.name,
        email=customer.email,
        user_type=customer.user_type,
        avatar=customer.avatar,
        gender=customer.gender,
        is_active=customer.is_active,
        last_login_at=customer.last_login_at,
        subscription_id=customer.subscription_id,
        subscription=None,
        has_active_subscription=customer.has_active_subscription,
        subscription_expiry_date=customer.subscription_expiry_date,
        notification_settings=None,
    )


def _require(owner, relation: str, assignment):
    value = getattr(owner, relation, None)
    if value is None:
        raise MissingRelationError(
            relation, ErrorContext(assignment_id=str(getattr(assignment, "id", ""))),
        )
    return value
