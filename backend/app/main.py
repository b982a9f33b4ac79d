from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.exceptions import register_exception_handlers
from core.query_logger import query_stats
from app.startup import configure_startup_logging, run_startup_checks

from modules.maintenance.routes import router as maintenance_router

configure_startup_logging()

app = FastAPI(
    title="GearGuard - Equipment Maintenance API",
    description="""
    Maintenance tracking for company equipment.

    ## Features

    * **Maintenance Requests** - Corrective and preventive requests with a NEW, IN_PROGRESS, REPAIRED or SCRAP lifecycle
    * **Equipment** - Inventory of machines, vehicles and IT assets with their owning team
    * **Teams** - Maintenance teams and their technician rosters
    * **Reports** - Request counts by stage, category and team, plus overdue tracking

    ## Authentication

    Every endpoint requires a bearer JWT whose subject is the user id.
    """,
    version="1.0.0",
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(maintenance_router, prefix=settings.API_PREFIX)


@app.on_event("startup")
async def startup_event():
    """Initialize services on application startup"""
    run_startup_checks()


@app.get("/health", tags=["health"])
async def health():
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "queries": query_stats.as_dict(),
    }
