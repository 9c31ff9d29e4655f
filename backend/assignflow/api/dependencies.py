"""API Dependencies — request-scoped access to the orchestrator and caller identity.

Invariants:
    - The orchestrator lives on app.state, built once in the lifespan
    - Caller identity comes from X-Worker-ID, set by the upstream auth gateway

Design Decisions:
    - Header identity instead of token parsing: authentication is owned upstream
"""

from uuid import UUID

from fastapi import Header, Request

from assignflow.services.assignment_orchestrator import AssignmentOrchestrator


def get_orchestrator(request: Request) -> AssignmentOrchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise RuntimeError("Orchestrator not initialized")
    return orchestrator


def get_worker_id(x_worker_id: UUID = Header(...)) -> UUID:
    """Authenticated worker's user id, forwarded by the gateway."""
    return x_worker_id
