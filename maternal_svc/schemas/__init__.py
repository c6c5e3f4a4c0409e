"""
Pydantic schemas for record validation, persistence and display.

This module contains all Pydantic models used at the tracker's boundaries.
"""
from maternal_svc.schemas.health_record import (
    BabyMovementData,
    BabyMovementRecord,
    BloodPressureData,
    BloodPressureRecord,
    HealthRecord,
    HealthRecordData,
    SugarLevelData,
    SugarLevelRecord,
    health_record_list_adapter,
)
from maternal_svc.schemas.patient import EmergencyContact, Patient
from maternal_svc.schemas.views import OverviewData, PregnancyProgress, RecordEntry

__all__ = [
    # Health record schemas
    "BabyMovementData",
    "BabyMovementRecord",
    "BloodPressureData",
    "BloodPressureRecord",
    "HealthRecord",
    "HealthRecordData",
    "SugarLevelData",
    "SugarLevelRecord",
    "health_record_list_adapter",
    # Patient schemas
    "EmergencyContact",
    "Patient",
    # View schemas
    "OverviewData",
    "PregnancyProgress",
    "RecordEntry",
]
