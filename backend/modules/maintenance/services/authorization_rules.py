# backend/modules/maintenance/services/authorization_rules.py

"""
Role rules for the maintenance request workflow.

Pure predicates with no I/O. The presentation layer may call them to decide
which actions to offer, but the lifecycle service re-checks every one of them
before it writes anything.
"""

from typing import Dict, Iterable, List, Optional

from ..enums import RequestStage, UserRole

# Directed stage graph; REPAIRED and SCRAP are terminal
VALID_TRANSITIONS: Dict[RequestStage, List[RequestStage]] = {
    RequestStage.NEW: [RequestStage.IN_PROGRESS, RequestStage.SCRAP],
    RequestStage.IN_PROGRESS: [RequestStage.REPAIRED, RequestStage.SCRAP],
    RequestStage.REPAIRED: [],
    RequestStage.SCRAP: [],
}


def is_valid_transition(current: RequestStage, target: RequestStage) -> bool:
    return target in VALID_TRANSITIONS.get(current, [])


def can_pick_up(
    role: UserRole, user_id: int, team_technician_ids: Iterable[int]
) -> bool:
    """Only a technician on the request's team may take a NEW request."""
    return role == UserRole.TECHNICIAN and user_id in set(team_technician_ids)


def can_mark_repaired(
    role: UserRole, user_id: int, assigned_technician_id: Optional[int]
) -> bool:
    """Only the assigned technician may close a request as repaired."""
    return (
        role == UserRole.TECHNICIAN
        and assigned_technician_id is not None
        and assigned_technician_id == user_id
    )


def can_mark_scrap(role: UserRole) -> bool:
    return role == UserRole.MANAGER


def can_create_preventive(role: UserRole) -> bool:
    return role == UserRole.MANAGER


def available_transitions(
    role: UserRole,
    user_id: int,
    stage: RequestStage,
    team_technician_ids: Iterable[int],
    assigned_technician_id: Optional[int],
) -> List[RequestStage]:
    """Target stages this actor may request from ``stage`` right now."""
    team_technician_ids = list(team_technician_ids)
    allowed = []
    for target in VALID_TRANSITIONS.get(stage, []):
        if target == RequestStage.IN_PROGRESS:
            permitted = can_pick_up(role, user_id, team_technician_ids)
        elif target == RequestStage.REPAIRED:
            permitted = can_mark_repaired(role, user_id, assigned_technician_id)
        else:
            permitted = can_mark_scrap(role)
        if permitted:
            allowed.append(target)
    return allowed
