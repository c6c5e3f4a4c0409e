"""
Display formatting for health records.

Pure functions of their input: nothing here reads or writes the store. Record
sequences are expected newest first, as the store returns them, and are never
re-sorted.
"""
import logging
from typing import List, Sequence

from maternal_svc.core.datetime_utils import format_display_date, format_display_time
from maternal_svc.core.exceptions import InvariantViolation
from maternal_svc.core.record_types import RecordType, get_record_type, sugar_test_label
from maternal_svc.schemas.health_record import PAYLOAD_MODELS, HealthRecord
from maternal_svc.schemas.views import RecordEntry

logger = logging.getLogger(__name__)


def _format_number(value: float) -> str:
    # 100.0 -> "100", 95.5 -> "95.5"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class RecordViewBuilder:
    """
    Turns records into summary strings and display entries.

    With ``strict`` set, a record whose payload does not match its type raises
    InvariantViolation. Otherwise the record is logged and left out of the list.
    """

    def __init__(self, strict: bool = True):
        self.strict = strict

    def summarize(self, record: HealthRecord) -> str:
        """
        One-line summary of a record's measurement.

        Examples:
            "120/80 mmHg • HR: 72 bpm"
            "95.5 mg/dL (Fasting)"
            "10 movements in 60 minutes"

        Raises:
            InvariantViolation: If the payload does not match the record type.
        """
        record_type = self._checked_type(record)
        data = record.data

        if record_type is RecordType.BLOOD_PRESSURE:
            summary = f"{data.systolic}/{data.diastolic} mmHg"
            if data.heart_rate is not None:
                summary += f" • HR: {data.heart_rate} bpm"
            return summary

        if record_type is RecordType.SUGAR_LEVEL:
            return f"{_format_number(data.level)} mg/dL ({sugar_test_label(data.test_type)})"

        return f"{data.count} movements in {data.duration} minutes"

    def describe(self, record: HealthRecord) -> RecordEntry:
        """Full display entry for one record."""
        definition = get_record_type(self._checked_type(record))
        notes = record.data.notes
        return RecordEntry(
            record=record,
            summary=self.summarize(record),
            type_label=definition.label,
            color=definition.color,
            date_display=format_display_date(record.date),
            time_display=format_display_time(record.date),
            notes=notes if notes else None,
        )

    def recent(self, records: Sequence[HealthRecord], n: int) -> List[HealthRecord]:
        """First ``n`` records of a newest-first sequence."""
        if n < 0:
            raise ValueError(f"n must not be negative, got {n}")
        return list(records[:n])

    def all(self, records: Sequence[HealthRecord]) -> List[HealthRecord]:
        """The whole newest-first sequence, unfiltered."""
        return list(records)

    def entries(self, records: Sequence[HealthRecord]) -> List[RecordEntry]:
        """
        Display entries for a sequence of records, in the given order.

        Raises:
            InvariantViolation: In strict mode, for the first malformed record.
        """
        result = []
        for record in records:
            try:
                result.append(self.describe(record))
            except InvariantViolation as e:
                logger.error(
                    f"Skipping malformed record: {e.detail}",
                    extra={"record_id": getattr(record, "id", None)},
                )
                if self.strict:
                    raise
        return result

    def _checked_type(self, record: HealthRecord) -> RecordType:
        record_id = getattr(record, "id", None)
        try:
            record_type = RecordType(record.type)
        except ValueError:
            raise InvariantViolation(
                f"Unknown record type '{record.type}'",
                record_id=record_id,
            ) from None

        if not isinstance(record.data, PAYLOAD_MODELS[record_type]):
            raise InvariantViolation(
                f"Record payload does not match type '{record_type.value}'",
                record_id=record_id,
            )
        return record_type
