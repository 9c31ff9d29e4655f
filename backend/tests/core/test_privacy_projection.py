"""Privacy Projection — worker-facing view of an assignment, built without IO.

Tests:
    - The booking owner's phone numbers never appear in the output
    - Subscription and notification settings come back as None placeholders
    - Missing required relations raise MissingRelationError
    - assigned_by_user is optional
"""

import uuid
from datetime import date, datetime, timezone

import pytest

from assignflow.core.errors import MissingRelationError
from assignflow.core.privacy_projection import project_assignment
from assignflow.models import Booking, Service, User, WorkerAssignment

NOW = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)


def _assignment(with_dispatcher=True) -> WorkerAssignment:
    customer = User(
        id=uuid.uuid4(),
        name="Dana Customer",
        email="dana@example.com",
        phone="+15550001111",
        user_type="normal",
        is_active=True,
        wallet_balance=250.0,
        subscription_id=uuid.uuid4(),
        has_active_subscription=True,
        notification_settings={"sms": True},
    )
    worker = User(
        id=uuid.uuid4(),
        name="Sam Worker",
        email="sam@example.com",
        phone="+15550009999",
        user_type="worker",
        is_active=True,
    )
    service = Service(
        id=uuid.uuid4(), name="Deep Cleaning", price_type="fixed", price=100.0,
    )
    booking = Booking(
        id=uuid.uuid4(),
        booking_reference="BK-1",
        user_id=customer.id,
        service_id=service.id,
        status="confirmed",
        payment_status="pending",
        booking_type="regular",
        scheduled_date=date(2026, 3, 2),
        address="12 Harbour Road",
        contact_person="Dana",
        contact_phone="+15550002222",
        user=customer,
        service=service,
    )
    dispatcher = User(id=uuid.uuid4(), name="Ari Dispatch", user_type="admin")
    return WorkerAssignment(
        id=uuid.uuid4(),
        booking_id=booking.id,
        worker_id=worker.id,
        assigned_by=dispatcher.id if with_dispatcher else None,
        status="accepted",
        assigned_at=NOW,
        accepted_at=NOW,
        assignment_notes="Bring ladder",
        booking=booking,
        worker=worker,
        assigned_by_user=dispatcher if with_dispatcher else None,
    )


def test_projection_excludes_customer_phone():
    response = project_assignment(_assignment())

    dumped = response.model_dump_json()
    assert "+15550001111" not in dumped
    assert "+15550002222" not in dumped
    assert "phone" not in response.booking.user.model_dump()
    assert "contact_phone" not in response.booking.model_dump()


def test_projection_keeps_worker_own_phone():
    response = project_assignment(_assignment())

    assert response.worker.phone == "+15550009999"


def test_projection_excludes_wallet_balance():
    dumped = project_assignment(_assignment()).booking.user.model_dump()

    assert "wallet_balance" not in dumped


def test_subscription_references_are_placeholders():
    customer = project_assignment(_assignment()).booking.user

    assert customer.subscription is None
    assert customer.notification_settings is None
    assert customer.has_active_subscription is True
    assert customer.subscription_id is not None


def test_projection_copies_assignment_fields():
    assignment = _assignment()
    response = project_assignment(assignment)

    assert response.id == assignment.id
    assert response.status == "accepted"
    assert response.assignment_notes == "Bring ladder"
    assert response.rejection_notes == ""
    assert response.booking.service.name == "Deep Cleaning"
    assert response.assigned_by_user.name == "Ari Dispatch"


def test_projection_without_dispatcher():
    response = project_assignment(_assignment(with_dispatcher=False))

    assert response.assigned_by is None
    assert response.assigned_by_user is None


@pytest.mark.parametrize("strip", ["booking", "worker", "user", "service"])
def test_missing_relation_raises(strip):
    assignment = _assignment()
    if strip in ("booking", "worker"):
        setattr(assignment, strip, None)
    else:
        setattr(assignment.booking, strip, None)

    with pytest.raises(MissingRelationError) as exc:
        project_assignment(assignment)

    assert exc.value.relation == strip
