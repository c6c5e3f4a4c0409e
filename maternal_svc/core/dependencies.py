"""
Dependency providers for the maternal health tracker.

This module builds the default object graph from settings:

    DashboardController
         ↓ constructor injection
    RecordStore (+ RecordFactory, RecordViewBuilder)
         ↓ constructor injection
    Database (SQLite key-value store)

The controller never reaches for a global store: it is always handed one.
These providers only decide what the default one is.

Testing:
    reset_dependencies()  # drop cached instances between tests
"""
import logging
from typing import Mapping, Optional

from maternal_svc.core.config import get_settings

logger = logging.getLogger(__name__)


# =============================================================================
# DATABASE DEPENDENCY
# =============================================================================

_database_instance: Optional["Database"] = None
_record_store_instance: Optional["RecordStore"] = None


def get_database() -> "Database":
    """
    Get the database instance, creating it on first use.

    Note:
        Import here to avoid circular imports with repositories.
    """
    global _database_instance

    if _database_instance is None:
        from maternal_svc.repositories.base import Database

        settings = get_settings()
        logger.info(f"Initializing database: {settings.database_path}")
        _database_instance = Database(
            db_path=settings.database_path,
            busy_timeout=settings.maternal_svc_db_busy_timeout
        )

    return _database_instance


# =============================================================================
# REPOSITORY DEPENDENCIES
# =============================================================================

def get_record_store() -> "RecordStore":
    """
    Get the record store.

    One store per process, built on the shared database.
    """
    global _record_store_instance

    if _record_store_instance is None:
        from maternal_svc.repositories import RecordStore

        _record_store_instance = RecordStore(
            db=get_database(),
            key_prefix=get_settings().maternal_svc_record_key_prefix,
        )

    return _record_store_instance


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_dashboard_controller(patients: Mapping[str, "Patient"]) -> "DashboardController":
    """
    Get a DashboardController wired to the shared record store.

    Args:
        patients: Read-only patient lookup keyed by patient ID.
    """
    from maternal_svc.services import DashboardController, RecordViewBuilder

    settings = get_settings()
    return DashboardController(
        store=get_record_store(),
        patients=patients,
        views=RecordViewBuilder(strict=not settings.is_production),
        recent_limit=settings.maternal_svc_recent_limit,
        full_term_weeks=settings.maternal_svc_full_term_weeks,
        clamp_progress=settings.maternal_svc_clamp_progress,
    )


def reset_dependencies() -> None:
    """
    Reset cached instances (for testing only).
    """
    global _database_instance, _record_store_instance
    _database_instance = None
    _record_store_instance = None
