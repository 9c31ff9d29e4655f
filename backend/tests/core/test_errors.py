"""Error Hierarchy — codes, categories, HTTP statuses, response envelope."""

from assignflow.core.errors import (
    ConfigurationError,
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    InvalidStateTransitionError,
    MissingRelationError,
    ResourceNotFoundError,
    SideEffectError,
    UnauthorizedError,
)


def test_not_found_and_unauthorized_share_wording():
    missing = ResourceNotFoundError("Assignment", "a-1")
    foreign = UnauthorizedError("Assignment", "a-1")

    assert missing.message == foreign.message
    assert missing.http_status == 404
    assert foreign.http_status == 403
    assert foreign.category is ErrorCategory.AUTHORIZATION


def test_invalid_transition_uses_past_tense():
    err = InvalidStateTransitionError("start", "assigned")

    assert err.message == "Assignment cannot be started in current status 'assigned'"
    assert err.http_status == 409
    assert err.category is ErrorCategory.BUSINESS_RULE


def test_to_response_envelope():
    context = ErrorContext(assignment_id="a-1", operation="complete")
    body = InvalidStateTransitionError("complete", "accepted", context).to_response()

    error = body["error"]
    assert error["code"] == "INVALID_STATE_TRANSITION"
    assert error["category"] == "business_rule"
    assert error["context"] == {"assignment_id": "a-1", "operation": "complete"}
    assert "timestamp" in error


def test_side_effect_error_records_side_effect_in_context():
    context = ErrorContext(assignment_id="a-1", booking_id="b-1", operation="accept")
    err = SideEffectError("create_chat_room", "timeout", context)

    assert err.log_extra() == {
        "error_code": "SIDE_EFFECT_FAILED",
        "assignment_id": "a-1",
        "booking_id": "b-1",
        "operation": "accept",
        "side_effect": "create_chat_room",
    }


def test_database_error_is_service_unavailable():
    err = DatabaseError("connection reset", "execute")

    assert err.http_status == 503
    assert err.message == "Database execute failed: connection reset"


def test_configuration_error_lists_missing_collaborators():
    err = ConfigurationError(["notifier", "pool"])

    assert err.missing == ["notifier", "pool"]
    assert "notifier, pool" in err.message


def test_missing_relation_is_internal():
    err = MissingRelationError("booking")

    assert err.relation == "booking"
    assert err.category is ErrorCategory.INTERNAL
    assert err.http_status == 500
