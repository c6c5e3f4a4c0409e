"""
Unit tests for building records from raw form input.

Tests cover:
- Parsing of form strings into typed payloads for every record type
- Rejection of missing, non-numeric, non-finite and out-of-range values
- Optional field handling (heartRate, notes, testType default)
- ID and timestamp stamping
"""
import math
from datetime import datetime, timedelta, timezone

import pytest

from maternal_svc.core.exceptions import ValidationError
from maternal_svc.core.record_types import SugarTestType
from maternal_svc.schemas.health_record import (
    BabyMovementRecord,
    BloodPressureRecord,
    SugarLevelRecord,
)
from maternal_svc.services.record_factory import RecordFactory, RecordIdGenerator


# =============================================================================
# TESTS: RecordIdGenerator
# =============================================================================

class TestRecordIdGenerator:
    """Tests for creation-ordered record IDs."""

    def test_ids_follow_clock(self):
        ticks = iter([1705314600000, 1705314600500])
        generator = RecordIdGenerator(clock=lambda: next(ticks))
        assert generator.next_id() == "1705314600000"
        assert generator.next_id() == "1705314600500"

    def test_same_millisecond_still_unique_and_increasing(self):
        generator = RecordIdGenerator(clock=lambda: 1705314600000)
        ids = [generator.next_id() for _ in range(5)]
        assert len(set(ids)) == 5
        assert ids == sorted(ids)

    def test_clock_going_backwards_keeps_order(self):
        ticks = iter([2000, 1000])
        generator = RecordIdGenerator(clock=lambda: next(ticks))
        first, second = generator.next_id(), generator.next_id()
        assert second > first

    def test_ids_are_zero_padded(self):
        generator = RecordIdGenerator(clock=lambda: 42)
        assert generator.next_id() == "0000000000042"

    def test_factories_share_default_generator(self):
        first, second = RecordFactory(), RecordFactory()
        ids = []
        for _ in range(200):
            for factory in (first, second):
                ids.append(factory.build("p-1", "baby_movement", {"count": "1", "duration": "5"}).id)
        assert len(set(ids)) == len(ids)
        assert ids == sorted(ids)


# =============================================================================
# TESTS: Blood pressure
# =============================================================================

class TestBloodPressure:
    """Tests for blood pressure form input."""

    def test_form_strings_parsed(self, record_factory):
        record = record_factory.build(
            "p-1", "blood_pressure",
            {"systolic": "120", "diastolic": " 80 ", "heartRate": "72", "notes": "after walk"},
        )
        assert isinstance(record, BloodPressureRecord)
        assert record.type == "blood_pressure"
        assert record.data.systolic == 120
        assert record.data.diastolic == 80
        assert record.data.heart_rate == 72
        assert record.data.notes == "after walk"

    def test_numbers_accepted(self, record_factory):
        record = record_factory.build("p-1", "blood_pressure", {"systolic": 118, "diastolic": 76.0})
        assert record.data.systolic == 118
        assert record.data.diastolic == 76

    def test_empty_heart_rate_is_absent(self, record_factory):
        record = record_factory.build(
            "p-1", "blood_pressure", {"systolic": "120", "diastolic": "80", "heartRate": ""}
        )
        assert record.data.heart_rate is None

    def test_empty_notes_retained(self, record_factory):
        record = record_factory.build(
            "p-1", "blood_pressure", {"systolic": "120", "diastolic": "80", "notes": ""}
        )
        assert record.data.notes == ""

    def test_missing_notes_is_absent(self, record_factory):
        record = record_factory.build("p-1", "blood_pressure", {"systolic": "120", "diastolic": "80"})
        assert record.data.notes is None

    def test_snake_case_field_names_accepted(self, record_factory):
        record = record_factory.build(
            "p-1", "blood_pressure", {"systolic": "120", "diastolic": "80", "heart_rate": "70"}
        )
        assert record.data.heart_rate == 70

    @pytest.mark.parametrize("systolic", ["", "   ", None, "abc", "12a", "120.5", "NaN", float("nan"), True])
    def test_bad_systolic_rejected(self, record_factory, systolic):
        with pytest.raises(ValidationError) as exc_info:
            record_factory.build("p-1", "blood_pressure", {"systolic": systolic, "diastolic": "80"})
        assert exc_info.value.field == "systolic"

    def test_missing_diastolic_rejected(self, record_factory):
        with pytest.raises(ValidationError) as exc_info:
            record_factory.build("p-1", "blood_pressure", {"systolic": "120"})
        assert exc_info.value.field == "diastolic"

    def test_non_positive_pressure_rejected(self, record_factory):
        with pytest.raises(ValidationError) as exc_info:
            record_factory.build("p-1", "blood_pressure", {"systolic": "0", "diastolic": "80"})
        assert exc_info.value.field == "systolic"

    def test_bad_heart_rate_rejected(self, record_factory):
        with pytest.raises(ValidationError) as exc_info:
            record_factory.build(
                "p-1", "blood_pressure", {"systolic": "120", "diastolic": "80", "heartRate": "fast"}
            )
        assert exc_info.value.field == "heartRate"

    def test_fields_of_other_variant_rejected(self, record_factory):
        with pytest.raises(ValidationError) as exc_info:
            record_factory.build(
                "p-1", "blood_pressure", {"systolic": "120", "diastolic": "80", "level": "95"}
            )
        assert exc_info.value.field == "level"


# =============================================================================
# TESTS: Sugar level
# =============================================================================

class TestSugarLevel:
    """Tests for blood sugar form input."""

    def test_decimal_level_parsed(self, record_factory):
        record = record_factory.build("p-1", "sugar_level", {"level": "95.5", "testType": "fasting"})
        assert isinstance(record, SugarLevelRecord)
        assert record.data.level == 95.5
        assert record.data.test_type is SugarTestType.FASTING

    def test_test_type_defaults_to_random(self, record_factory):
        record = record_factory.build("p-1", "sugar_level", {"level": "110"})
        assert record.data.test_type is SugarTestType.RANDOM

    def test_unknown_test_type_rejected(self, record_factory):
        with pytest.raises(ValidationError) as exc_info:
            record_factory.build("p-1", "sugar_level", {"level": "110", "testType": "bedtime"})
        assert exc_info.value.field == "testType"

    @pytest.mark.parametrize(
        "level", ["", "high", "nan", "inf", float("inf"), math.nan, "-5", "0", "1_000", "1e3", "9.5.1"]
    )
    def test_bad_level_rejected(self, record_factory, level):
        with pytest.raises(ValidationError) as exc_info:
            record_factory.build("p-1", "sugar_level", {"level": level, "testType": "random"})
        assert exc_info.value.field == "level"


# =============================================================================
# TESTS: Baby movement
# =============================================================================

class TestBabyMovement:
    """Tests for fetal movement form input."""

    def test_counts_parsed(self, record_factory):
        record = record_factory.build("p-1", "baby_movement", {"count": "10", "duration": "60"})
        assert isinstance(record, BabyMovementRecord)
        assert record.data.count == 10
        assert record.data.duration == 60

    def test_zero_movements_allowed(self, record_factory):
        record = record_factory.build("p-1", "baby_movement", {"count": "0", "duration": "30"})
        assert record.data.count == 0

    def test_zero_duration_rejected(self, record_factory):
        with pytest.raises(ValidationError) as exc_info:
            record_factory.build("p-1", "baby_movement", {"count": "4", "duration": "0"})
        assert exc_info.value.field == "duration"

    def test_negative_count_rejected(self, record_factory):
        with pytest.raises(ValidationError):
            record_factory.build("p-1", "baby_movement", {"count": "-1", "duration": "30"})


# =============================================================================
# TESTS: Stamping
# =============================================================================

class TestStamping:
    """Tests for record identity and creation time."""

    def test_record_stamped_with_clock_time_and_owner(self, record_factory, clock):
        record = record_factory.build("p-1", "baby_movement", {"count": "3", "duration": "15"})
        assert record.patient_id == "p-1"
        assert record.date == clock.now

    def test_naive_clock_time_normalized_to_utc(self):
        factory = RecordFactory(clock=lambda: datetime(2024, 1, 15, 10, 30))
        record = factory.build("p-1", "baby_movement", {"count": "3", "duration": "15"})
        assert record.date.tzinfo == timezone.utc

    def test_ids_sort_in_creation_order(self, record_factory, clock):
        first = record_factory.build("p-1", "baby_movement", {"count": "3", "duration": "15"})
        clock.advance(minutes=1)
        second = record_factory.build("p-1", "baby_movement", {"count": "5", "duration": "15"})
        assert second.id > first.id

    def test_records_are_frozen(self, record_factory):
        record = record_factory.build("p-1", "baby_movement", {"count": "3", "duration": "15"})
        with pytest.raises(Exception):
            record.data = None

    def test_unknown_record_type_rejected(self, record_factory):
        with pytest.raises(ValidationError) as exc_info:
            record_factory.build("p-1", "weight", {"value": "70"})
        assert exc_info.value.field == "type"

    def test_blank_patient_rejected(self, record_factory):
        with pytest.raises(ValidationError):
            record_factory.build("", "baby_movement", {"count": "3", "duration": "15"})

    def test_non_string_patient_rejected(self, record_factory):
        with pytest.raises(ValidationError) as exc_info:
            record_factory.build(123, "baby_movement", {"count": "3", "duration": "15"})
        assert exc_info.value.field == "patientId"

    def test_timestamp_truncated_to_milliseconds(self):
        factory = RecordFactory(clock=lambda: datetime(2024, 1, 15, 10, 30, 0, 661127, tzinfo=timezone.utc))
        record = factory.build("p-1", "baby_movement", {"count": "3", "duration": "15"})
        assert record.date == datetime(2024, 1, 15, 10, 30, 0, 661000, tzinfo=timezone.utc)

    def test_validation_error_payload(self, record_factory):
        with pytest.raises(ValidationError) as exc_info:
            record_factory.build("p-1", "blood_pressure", {"systolic": "abc", "diastolic": "80"})
        payload = exc_info.value.to_dict()
        assert payload["error"] == "ValidationError"
        assert payload["context"]["field"] == "systolic"
        assert payload["context"]["value"] == "abc"
