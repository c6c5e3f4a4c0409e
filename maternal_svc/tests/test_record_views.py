"""
Unit tests for record display formatting.

Tests cover:
- summarize: one fixed summary per record type
- recent / all: slicing without re-sorting
- describe / entries: display entries and handling of malformed records
"""
import pytest

from maternal_svc.core.exceptions import InvariantViolation
from maternal_svc.schemas.health_record import BabyMovementData, BloodPressureRecord
from maternal_svc.services.record_views import RecordViewBuilder


@pytest.fixture
def views():
    return RecordViewBuilder()


def _malformed(record_factory):
    """A blood pressure record carrying a baby movement payload, bypassing validation."""
    good = record_factory.build("p-1", "blood_pressure", {"systolic": "120", "diastolic": "80"})
    return BloodPressureRecord.model_construct(
        id=good.id,
        patient_id="p-1",
        date=good.date,
        type="blood_pressure",
        data=BabyMovementData(count=1, duration=5),
    )


class TestSummarize:
    """Tests for RecordViewBuilder.summarize."""

    def test_blood_pressure_with_heart_rate(self, views, record_factory):
        record = record_factory.build(
            "p-1", "blood_pressure", {"systolic": 120, "diastolic": 80, "heartRate": 72}
        )
        assert views.summarize(record) == "120/80 mmHg • HR: 72 bpm"

    def test_blood_pressure_without_heart_rate(self, views, record_factory):
        record = record_factory.build("p-1", "blood_pressure", {"systolic": "120", "diastolic": "80"})
        assert views.summarize(record) == "120/80 mmHg"

    def test_sugar_level_fasting(self, views, record_factory):
        record = record_factory.build("p-1", "sugar_level", {"level": 95.5, "testType": "fasting"})
        assert views.summarize(record) == "95.5 mg/dL (Fasting)"

    @pytest.mark.parametrize("test_type,label", [("post_meal", "Post-meal"), ("random", "Random")])
    def test_sugar_level_labels(self, views, record_factory, test_type, label):
        record = record_factory.build("p-1", "sugar_level", {"level": "140", "testType": test_type})
        assert views.summarize(record) == f"140 mg/dL ({label})"

    def test_baby_movement(self, views, record_factory):
        record = record_factory.build("p-1", "baby_movement", {"count": 10, "duration": 60})
        assert views.summarize(record) == "10 movements in 60 minutes"

    def test_mismatched_payload_raises(self, views, record_factory):
        with pytest.raises(InvariantViolation):
            views.summarize(_malformed(record_factory))


class TestSlicing:
    """Tests for recent and all."""

    def _records(self, record_factory, n):
        # Newest first, as the store returns them
        return [
            record_factory.build("p-1", "baby_movement", {"count": str(i), "duration": "10"})
            for i in range(n)
        ][::-1]

    def test_recent_takes_head_without_sorting(self, views, record_factory):
        records = self._records(record_factory, 5)
        assert views.recent(records, 3) == records[:3]

    def test_recent_with_fewer_records(self, views, record_factory):
        records = self._records(record_factory, 2)
        assert views.recent(records, 3) == records

    def test_recent_zero(self, views, record_factory):
        assert views.recent(self._records(record_factory, 2), 0) == []

    def test_recent_negative_rejected(self, views):
        with pytest.raises(ValueError):
            views.recent([], -1)

    def test_all_keeps_order(self, views, record_factory):
        records = self._records(record_factory, 4)
        shuffled = [records[2], records[0], records[3], records[1]]
        assert views.all(shuffled) == shuffled


class TestEntries:
    """Tests for describe and entries."""

    def test_describe_fields(self, views, record_factory):
        record = record_factory.build(
            "p-1", "blood_pressure", {"systolic": "120", "diastolic": "80", "notes": "felt dizzy"}
        )
        entry = views.describe(record)

        assert entry.record == record
        assert entry.summary == "120/80 mmHg"
        assert entry.type_label == "blood pressure"
        assert entry.color == "#EF4444"
        assert entry.date_display == "15 Jan 2024"
        assert entry.time_display == "10:30"
        assert entry.notes == "felt dizzy"

    def test_empty_notes_not_displayed(self, views, record_factory):
        record = record_factory.build("p-1", "baby_movement", {"count": "4", "duration": "20", "notes": ""})
        assert views.describe(record).notes is None
        # Still stored verbatim on the record
        assert record.data.notes == ""

    def test_strict_entries_raise_on_malformed(self, record_factory):
        strict = RecordViewBuilder(strict=True)
        with pytest.raises(InvariantViolation):
            strict.entries([_malformed(record_factory)])

    def test_lenient_entries_skip_malformed(self, record_factory, caplog):
        lenient = RecordViewBuilder(strict=False)
        good = record_factory.build("p-1", "baby_movement", {"count": "4", "duration": "20"})

        entries = lenient.entries([_malformed(record_factory), good])

        assert [e.record for e in entries] == [good]
        assert "Skipping malformed record" in caplog.text
