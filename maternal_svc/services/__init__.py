"""
Service layer for business logic.

This module contains record construction, progress calculation, display
formatting and the dashboard controller that orchestrates them.
"""
from maternal_svc.services.dashboard_service import DashboardController, SubmissionResult
from maternal_svc.services.progress_service import calculate_progress
from maternal_svc.services.record_factory import RecordFactory, RecordIdGenerator
from maternal_svc.services.record_views import RecordViewBuilder

__all__ = [
    "DashboardController",
    "SubmissionResult",
    "calculate_progress",
    "RecordFactory",
    "RecordIdGenerator",
    "RecordViewBuilder",
]
