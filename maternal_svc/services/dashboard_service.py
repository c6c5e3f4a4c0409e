"""
Dashboard controller: the entry point the patient dashboard calls into.

Architecture:
    Dashboard UI → DashboardController → RecordFactory / RecordStore
                                       → progress_service / RecordViewBuilder

Submitting a record never raises for user-recoverable problems. Bad input,
unknown patients and failed writes come back as a SubmissionResult carrying
the error. InvariantViolation is a defect and propagates.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple, Union

from maternal_svc.core.datetime_utils import format_display_date
from maternal_svc.core.exceptions import (
    HealthTrackerError,
    PatientNotFoundError,
    PersistenceError,
    ValidationError,
)
from maternal_svc.core.logging_config import patient_context
from maternal_svc.core.record_types import RecordType, RecordTypeDefinition, list_record_types
from maternal_svc.repositories.record_store import RecordStore
from maternal_svc.schemas.health_record import HealthRecord
from maternal_svc.schemas.patient import Patient
from maternal_svc.schemas.views import OverviewData, RecordEntry
from maternal_svc.services.progress_service import FULL_TERM_WEEKS, calculate_progress
from maternal_svc.services.record_factory import RecordFactory
from maternal_svc.services.record_views import RecordViewBuilder

logger = logging.getLogger(__name__)

DUE_DATE_NOT_SET = "Not set"


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a record submission: exactly one of record or error is set."""

    record: Optional[HealthRecord] = None
    error: Optional[HealthTrackerError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, record: HealthRecord) -> "SubmissionResult":
        return cls(record=record)

    @classmethod
    def failure(cls, error: HealthTrackerError) -> "SubmissionResult":
        return cls(error=error)


class DashboardController:
    """
    Wires dashboard events to the record store and builds the screen data.

    The store is passed in explicitly; the controller holds no other state.
    """

    def __init__(
        self,
        store: RecordStore,
        patients: Mapping[str, Patient],
        factory: Optional[RecordFactory] = None,
        views: Optional[RecordViewBuilder] = None,
        recent_limit: int = 3,
        full_term_weeks: int = FULL_TERM_WEEKS,
        clamp_progress: bool = False,
    ):
        """
        Args:
            store: Record store shared with every other reader of the records.
            patients: Read-only patient lookup keyed by patient ID.
            factory: Builds records from form input.
            views: Formats records for display.
            recent_limit: Number of records on the overview screen.
            full_term_weeks: Length of a full-term pregnancy.
            clamp_progress: Cap percent complete at 100.
        """
        self._store = store
        self._patients = patients
        self._factory = factory or RecordFactory()
        self._views = views or RecordViewBuilder()
        self._recent_limit = recent_limit
        self._full_term_weeks = full_term_weeks
        self._clamp_progress = clamp_progress

    def get_patient(self, patient_id: str) -> Patient:
        """
        Raises:
            PatientNotFoundError: If the patient is unknown.
        """
        patient = self._patients.get(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id=patient_id)
        return patient

    def submit_record(
        self,
        patient_id: str,
        record_type: Union[RecordType, str],
        raw_fields: Mapping[str, Any],
    ) -> SubmissionResult:
        """
        Validate a completed form and append the new record.

        Args:
            patient_id: Patient submitting the form.
            record_type: blood_pressure, sugar_level or baby_movement.
            raw_fields: Form values, usually strings from input widgets.

        Returns:
            SubmissionResult with the persisted record, or with a ValidationError,
            PersistenceError or PatientNotFoundError. Nothing is stored on failure.
        """
        with patient_context(patient_id):
            logger.info("Submitting record", extra={"record_type": str(getattr(record_type, "value", record_type))})
            try:
                self.get_patient(patient_id)
                record = self._factory.build(patient_id, record_type, raw_fields)
                self._store.append(patient_id, record)
            except (ValidationError, PatientNotFoundError) as e:
                logger.warning(f"Record rejected: {e.detail}", extra={"context": e.context})
                return SubmissionResult.failure(e)
            except PersistenceError as e:
                logger.error(f"Record not saved: {e.detail}", extra={"context": e.context})
                return SubmissionResult.failure(e)

            logger.info("Record saved", extra={"record_id": record.id})
            return SubmissionResult.success(record)

    def get_overview_data(self, patient_id: str, now: Optional[datetime] = None) -> OverviewData:
        """
        Data for the overview screen: progress, latest records and emergency contacts.

        Raises:
            PatientNotFoundError: If the patient is unknown.
            PersistenceError: If the records cannot be read.
        """
        with patient_context(patient_id):
            patient = self.get_patient(patient_id)
            records = self._store.load(patient_id)
            recent = self._views.recent(records, self._recent_limit)

            return OverviewData(
                greeting=f"Welcome back, {patient.name}",
                patient_name=patient.name,
                current_week=patient.current_week or 0,
                full_term_weeks=self._full_term_weeks,
                due_date_display=(
                    format_display_date(patient.due_date) if patient.due_date else DUE_DATE_NOT_SET
                ),
                progress=calculate_progress(
                    patient.due_date,
                    patient.current_week,
                    now=now,
                    full_term_weeks=self._full_term_weeks,
                    clamp=self._clamp_progress,
                ),
                recent_records=self._views.entries(recent),
                emergency_contacts=patient.emergency_contacts,
            )

    def get_full_history(self, patient_id: str) -> List[RecordEntry]:
        """
        Every record of the patient, newest first, with summary and date/time.

        Raises:
            PatientNotFoundError: If the patient is unknown.
            PersistenceError: If the records cannot be read.
        """
        with patient_context(patient_id):
            self.get_patient(patient_id)
            records = self._store.load(patient_id)
            return self._views.entries(self._views.all(records))

    def available_record_types(self) -> Tuple[RecordTypeDefinition, ...]:
        """Record types the dashboard offers "add record" actions for."""
        return list_record_types()
