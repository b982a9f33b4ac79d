# backend/modules/maintenance/routes/__init__.py
"""Maintenance routes module"""

from fastapi import APIRouter

from .equipment_routes import router as equipment_router
from .organization_routes import router as organization_router
from .report_routes import router as report_router
from .request_routes import router as request_router

router = APIRouter(prefix="/maintenance")
router.include_router(request_router)
router.include_router(equipment_router)
router.include_router(organization_router)
router.include_router(report_router)

__all__ = ["router"]
