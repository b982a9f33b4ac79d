"""
Application startup validation and initialization.

Checks configuration and database connectivity, and creates the maintenance
tables when they are missing, before the app starts serving requests.
"""

import logging
import sys
from typing import List, Tuple

import sqlalchemy as sa
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from core.database import Base, engine

logger = logging.getLogger(__name__)

REQUIRED_TABLES = [
    "departments",
    "users",
    "maintenance_teams",
    "maintenance_team_technicians",
    "equipment",
    "maintenance_requests",
    "maintenance_notes",
]


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_environment_config(self) -> bool:
        if settings.is_development and "dev-secret" in settings.JWT_SECRET_KEY:
            self.warnings.append("Using development JWT_SECRET_KEY - change for production")
        if settings.is_sqlite and settings.is_production:
            self.warnings.append("SQLite database configured in production")
        return True

    def check_database_connection(self) -> bool:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except SQLAlchemyError as e:
            self.errors.append(f"Database connection failed: {e}")
            return False

    def ensure_tables(self) -> bool:
        """Create missing maintenance tables"""
        # Registers the models with Base.metadata
        import modules.maintenance.models  # noqa: F401

        try:
            existing_tables = set(sa.inspect(engine).get_table_names())
            missing_tables = [t for t in REQUIRED_TABLES if t not in existing_tables]
            if missing_tables:
                logger.info("Creating tables: %s", ", ".join(missing_tables))
                Base.metadata.create_all(bind=engine)
            return True
        except SQLAlchemyError as e:
            self.errors.append(f"Could not create database tables: {e}")
            return False

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """Run all validation checks"""
        checks = [
            ("Environment Configuration", self.check_environment_config),
            ("Database Connection", self.check_database_connection),
            ("Database Tables", self.ensure_tables),
        ]

        all_passed = True
        for check_name, check_func in checks:
            logger.info(f"Running check: {check_name}")
            if not check_func():
                all_passed = False

        return all_passed, self.errors, self.warnings


def run_startup_checks():
    """Run all startup validation checks"""
    logger.info("Starting GearGuard maintenance API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    validator = StartupValidator()
    passed, errors, warnings = validator.validate_all()

    for warning in warnings:
        logger.warning(f"Startup warning: {warning}")

    for error in errors:
        logger.error(f"Startup error: {error}")

    if not passed and settings.is_production:
        logger.error("Cannot start in production with errors!")
        sys.exit(1)
    elif not passed:
        logger.warning("Starting in development mode despite errors")
    else:
        logger.info("All startup checks passed")

    return passed, warnings


def configure_startup_logging():
    """Configure logging for startup"""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
