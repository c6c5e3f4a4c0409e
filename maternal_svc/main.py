"""
Application entry point for the maternal health tracker.

The dashboard UI is an external collaborator; it calls create_dashboard() once
at startup and then talks to the returned controller:

    controller = create_dashboard(patients={"p-1": patient})
    result = controller.submit_record("p-1", "blood_pressure", {"systolic": "120", "diastolic": "80"})
    if not result.ok:
        show_error(result.error.detail)
    overview = controller.get_overview_data("p-1")

Startup:
    - Configures structured logging from settings
    - Ensures the data directory exists
    - Initializes the database (triggers schema creation)
"""
import logging
from typing import Mapping

from maternal_svc.core.config import get_settings
from maternal_svc.core.dependencies import get_dashboard_controller, get_database
from maternal_svc.core.logging_config import setup_logging
from maternal_svc.schemas.patient import Patient
from maternal_svc.services.dashboard_service import DashboardController

logger = logging.getLogger(__name__)


def create_dashboard(patients: Mapping[str, Patient]) -> DashboardController:
    """
    Configure the tracker and return a controller for the given patients.

    Args:
        patients: Read-only patient lookup keyed by patient ID.
    """
    settings = get_settings()
    setup_logging(level=settings.log_level, json_format=settings.log_format.lower() == "json")

    settings.ensure_directories()
    get_database()

    logger.info(
        "Maternal health tracker started",
        extra={
            "database": settings.database_path,
            "environment": settings.maternal_svc_environment,
            "patients": len(patients),
        },
    )
    return get_dashboard_controller(patients)
