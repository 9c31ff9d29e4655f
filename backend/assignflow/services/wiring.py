"""Wiring — builds the orchestrator graph from a session manager and a side-effect pool.

Invariants:
    - The only place SQL repositories and port adapters are chosen
    - Every collaborator passed explicitly (no global lookups at call time)
"""

from assignflow.config import Settings
from assignflow.infrastructure.call_masking import SqlCallMaskingGateway
from assignflow.infrastructure.chat_rooms import SqlChatRoomManager
from assignflow.infrastructure.database import DatabaseSessionManager
from assignflow.infrastructure.location_tracking import SqlLocationTracker
from assignflow.infrastructure.notifications import SqlNotificationDispatcher
from assignflow.infrastructure.repositories import SqlRepositoryFactory
from assignflow.infrastructure.side_effect_pool import SideEffectPool
from assignflow.services.assignment_orchestrator import AssignmentOrchestrator
from assignflow.services.side_effect_dispatch import SideEffectDispatch


def build_orchestrator(
    db_manager: DatabaseSessionManager,
    pool: SideEffectPool,
    settings: Settings | None = None,
) -> AssignmentOrchestrator:
    repositories = SqlRepositoryFactory()
    close_reason = settings.chat_room_close_reason if settings else "Service completed"
    dispatch = SideEffectDispatch(
        pool=pool,
        db_manager=db_manager,
        repositories=repositories,
        chat_rooms=SqlChatRoomManager(db_manager),
        call_masking=SqlCallMaskingGateway(db_manager),
        location_tracker=SqlLocationTracker(db_manager),
        notifier=SqlNotificationDispatcher(db_manager),
        chat_room_close_reason=close_reason,
    )
    return AssignmentOrchestrator(db_manager, repositories, dispatch)
