"""Worker Assignments — worker-facing endpoints for the assignment lifecycle.

Invariants:
    - Every endpoint is scoped to the caller from X-Worker-ID
    - Every response body goes through project_assignment (no customer phone)
    - Routes hold no business logic: validation by Pydantic, rules by the orchestrator
    - Domain errors propagate to the global handlers (404 / 403 / 409 / 503)

Design Decisions:
    - POST per operation instead of PATCH status: each transition has its own payload
    - Accept, start and complete bodies are optional; reject needs a reason
    - date query parameter filters on the booking's scheduled date
"""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from assignflow.api.dependencies import get_orchestrator, get_worker_id
from assignflow.core.domain_types import AssignmentStatus
from assignflow.core.privacy_projection import project_assignment
from assignflow.schemas.assignment import (
    AcceptAssignmentRequest,
    AssignmentListResponse,
    AssignmentResponse,
    CompleteAssignmentRequest,
    RejectAssignmentRequest,
    StartAssignmentRequest,
)
from assignflow.services.assignment_orchestrator import AssignmentOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/worker/assignments", tags=["worker-assignments"])


@router.get("", response_model=AssignmentListResponse)
async def list_assignments(
    status_filter: AssignmentStatus | None = Query(None, alias="status"),
    scheduled_date: date | None = Query(None, alias="date"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    worker_id: UUID = Depends(get_worker_id),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator),
):
    """List the caller's assignments, newest first."""
    return await orchestrator.list_for_worker(
        worker_id,
        status=status_filter.value if status_filter else None,
        scheduled_date=scheduled_date,
        page=page,
        limit=limit,
    )


@router.get("/{assignment_id}", response_model=AssignmentResponse)
async def get_assignment(
    assignment_id: UUID,
    worker_id: UUID = Depends(get_worker_id),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator),
):
    assignment = await orchestrator.get(assignment_id, worker_id)
    return project_assignment(assignment)


@router.post("/{assignment_id}/accept", response_model=AssignmentResponse)
async def accept_assignment(
    assignment_id: UUID,
    body: AcceptAssignmentRequest | None = None,
    worker_id: UUID = Depends(get_worker_id),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator),
):
    body = body or AcceptAssignmentRequest()
    assignment = await orchestrator.accept(assignment_id, worker_id, body.notes)
    return project_assignment(assignment)


@router.post("/{assignment_id}/reject", response_model=AssignmentResponse)
async def reject_assignment(
    assignment_id: UUID,
    body: RejectAssignmentRequest,
    worker_id: UUID = Depends(get_worker_id),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator),
):
    assignment = await orchestrator.reject(
        assignment_id, worker_id, body.reason, body.notes,
    )
    return project_assignment(assignment)


@router.post("/{assignment_id}/start", response_model=AssignmentResponse)
async def start_assignment(
    assignment_id: UUID,
    body: StartAssignmentRequest | None = None,
    worker_id: UUID = Depends(get_worker_id),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator),
):
    body = body or StartAssignmentRequest()
    assignment = await orchestrator.start(assignment_id, worker_id, body.notes)
    return project_assignment(assignment)


@router.post("/{assignment_id}/complete", response_model=AssignmentResponse)
async def complete_assignment(
    assignment_id: UUID,
    body: CompleteAssignmentRequest | None = None,
    worker_id: UUID = Depends(get_worker_id),
    orchestrator: AssignmentOrchestrator = Depends(get_orchestrator),
):
    """Finish the job. Materials and photos are logged with the completion."""
    body = body or CompleteAssignmentRequest()
    assignment = await orchestrator.complete(
        assignment_id, worker_id, body.notes,
        materials_used=body.materials_used, photos=body.photos,
    )
    return project_assignment(assignment)
