# backend/modules/maintenance/routes/dependencies.py

from fastapi import Depends
from sqlalchemy.orm import Session

from core.auth import AuthenticatedUser, get_current_user
from core.database import get_db
from core.exceptions import AuthenticationError, ForbiddenError
from ..enums import UserRole
from ..models import User
from ..schemas import Actor
from ..services.lifecycle_service import RequestLifecycleService
from ..services.repository import SQLAlchemyMaintenanceRepository


async def get_current_actor(
    current_user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Actor:
    """Resolve the caller's role from the user record, not from the token"""
    user = db.get(User, current_user.id)
    if not user:
        raise AuthenticationError("User no longer exists")
    return Actor(id=user.id, role=user.role)


async def require_manager(actor: Actor = Depends(get_current_actor)) -> Actor:
    if actor.role != UserRole.MANAGER:
        raise ForbiddenError("Manager role required")
    return actor


def get_lifecycle_service(db: Session = Depends(get_db)) -> RequestLifecycleService:
    return RequestLifecycleService(SQLAlchemyMaintenanceRepository(db))
