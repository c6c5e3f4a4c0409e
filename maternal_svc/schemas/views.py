"""
Pydantic schemas for the display data handed to the dashboard.

These are read-only snapshots; nothing here is persisted.
"""
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from maternal_svc.schemas.health_record import HealthRecord
from maternal_svc.schemas.patient import EmergencyContact


class _ViewModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class PregnancyProgress(_ViewModel):
    """Derived gestational progress."""
    percent_complete: int = Field(..., description="Percent of a full-term pregnancy completed", examples=[50])
    weeks_remaining: int = Field(..., ge=0, description="Whole weeks until the due date", examples=[2])


class RecordEntry(_ViewModel):
    """One record as shown in the recent list or the full history."""
    record: HealthRecord
    summary: str = Field(..., examples=["120/80 mmHg • HR: 72 bpm"])
    type_label: str = Field(..., examples=["blood pressure"])
    color: str = Field(..., examples=["#EF4444"])
    date_display: str = Field(..., examples=["15 Jan 2024"])
    time_display: str = Field(..., examples=["10:30"])
    notes: Optional[str] = Field(None, description="Only set when the record carries non-empty notes")


class OverviewData(_ViewModel):
    """Everything the overview screen needs for one patient."""
    greeting: str = Field(..., examples=["Welcome back, Jane Doe"])
    patient_name: str
    current_week: int = Field(..., ge=0)
    full_term_weeks: int = Field(..., ge=1)
    due_date_display: str = Field(..., examples=["01 Mar 2025", "Not set"])
    progress: PregnancyProgress
    recent_records: List[RecordEntry]
    emergency_contacts: Tuple[EmergencyContact, ...]
