# backend/modules/maintenance/routes/organization_routes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from core.database import get_db
from ..enums import UserRole
from ..schemas import (
    Actor,
    Department,
    DepartmentCreate,
    Team,
    TeamCreate,
    TeamUpdate,
    User,
    UserCreate,
)
from ..services.organization_service import OrganizationService
from .dependencies import get_current_actor, require_manager

router = APIRouter(tags=["organization"])


# Departments
@router.get("/departments", response_model=List[Department])
async def list_departments(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return OrganizationService(db).list_departments()


@router.post(
    "/departments", response_model=Department, status_code=status.HTTP_201_CREATED
)
async def create_department(
    department_data: DepartmentCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manager),
):
    return OrganizationService(db).create_department(department_data)


# Users
@router.get("/users", response_model=List[User])
async def list_users(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    team_id: Optional[int] = Query(None, description="Only members of this team"),
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return OrganizationService(db).list_users(role=role, team_id=team_id)


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manager),
):
    return OrganizationService(db).create_user(user_data)


@router.get("/users/{user_id}", response_model=User)
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return OrganizationService(db).get_user(user_id)


# Teams
@router.get("/teams", response_model=List[Team])
async def list_teams(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return OrganizationService(db).list_teams()


@router.post("/teams", response_model=Team, status_code=status.HTTP_201_CREATED)
async def create_team(
    team_data: TeamCreate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manager),
):
    """
    Create a maintenance team.

    Raises:
        400: A roster id is unknown or not a technician
        409: Team name already taken
    """
    return OrganizationService(db).create_team(team_data)


@router.get("/teams/{team_id}", response_model=Team)
async def get_team(
    team_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return OrganizationService(db).get_team(team_id)


@router.put("/teams/{team_id}", response_model=Team)
async def update_team(
    team_id: int,
    update_data: TeamUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manager),
):
    return OrganizationService(db).update_team(team_id, update_data)


@router.delete("/teams/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team(
    team_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_manager),
):
    OrganizationService(db).delete_team(team_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
