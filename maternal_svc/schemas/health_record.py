"""
Pydantic schemas for health records.

A health record is a discriminated union over the record type tag: the shape of
``data`` is fixed by ``type``, and payloads reject fields from other variants.
Records are frozen once constructed.

Persisted form (one JSON object per record, camelCase keys):
    {
        "id": "1705314600000",
        "patientId": "p-1",
        "date": "2024-01-15T10:30:00.000Z",
        "type": "blood_pressure",
        "data": {"systolic": 120, "diastolic": 80, "heartRate": 72, "notes": ""}
    }
"""
from datetime import datetime
from typing import Annotated, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from maternal_svc.core.datetime_utils import format_iso, parse_datetime, to_utc
from maternal_svc.core.record_types import RecordType, SugarTestType


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        strict=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# PAYLOADS
# =============================================================================

class BloodPressureData(_CamelModel):
    """Blood pressure reading."""
    systolic: int = Field(..., gt=0, description="Systolic pressure in mmHg", examples=[120])
    diastolic: int = Field(..., gt=0, description="Diastolic pressure in mmHg", examples=[80])
    heart_rate: Optional[int] = Field(None, gt=0, description="Heart rate in bpm", examples=[72])
    notes: Optional[str] = Field(None, description="Free-text notes")


class SugarLevelData(_CamelModel):
    """Blood sugar reading."""
    level: float = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Blood sugar level in mg/dL",
        examples=[95.5],
    )
    test_type: SugarTestType = Field(..., description="When the reading was taken", examples=["fasting"])
    notes: Optional[str] = Field(None, description="Free-text notes")

    @field_validator("test_type", mode="before")
    @classmethod
    def _coerce_test_type(cls, value):
        # Strict mode would otherwise refuse the plain string read back from JSON
        if isinstance(value, str) and not isinstance(value, SugarTestType):
            return SugarTestType(value)
        return value


class BabyMovementData(_CamelModel):
    """Fetal movement count over an observation window."""
    count: int = Field(..., ge=0, description="Number of movements felt", examples=[10])
    duration: int = Field(..., gt=0, description="Observation window in minutes", examples=[60])
    notes: Optional[str] = Field(None, description="Free-text notes")


HealthRecordData = Union[BloodPressureData, SugarLevelData, BabyMovementData]


# =============================================================================
# RECORDS
# =============================================================================

class _HealthRecordBase(_CamelModel):
    id: str = Field(..., min_length=1, description="Creation-ordered unique identifier")
    patient_id: str = Field(..., min_length=1, description="Owning patient")
    date: datetime = Field(..., description="Creation timestamp (UTC)")

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value):
        if isinstance(value, str):
            return parse_datetime(value)
        return value

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: datetime) -> datetime:
        # Persisted timestamps carry milliseconds; keep the in-memory record equal to its stored form
        value = to_utc(value)
        return value.replace(microsecond=value.microsecond // 1000 * 1000)

    @field_serializer("date")
    def _serialize_date(self, value: datetime) -> str:
        return format_iso(value)


class BloodPressureRecord(_HealthRecordBase):
    type: Literal["blood_pressure"] = "blood_pressure"
    data: BloodPressureData


class SugarLevelRecord(_HealthRecordBase):
    type: Literal["sugar_level"] = "sugar_level"
    data: SugarLevelData


class BabyMovementRecord(_HealthRecordBase):
    type: Literal["baby_movement"] = "baby_movement"
    data: BabyMovementData


HealthRecord = Annotated[
    Union[BloodPressureRecord, SugarLevelRecord, BabyMovementRecord],
    Field(discriminator="type"),
]

RECORD_MODELS: Dict[RecordType, Type[_HealthRecordBase]] = {
    RecordType.BLOOD_PRESSURE: BloodPressureRecord,
    RecordType.SUGAR_LEVEL: SugarLevelRecord,
    RecordType.BABY_MOVEMENT: BabyMovementRecord,
}

PAYLOAD_MODELS: Dict[RecordType, Type[_CamelModel]] = {
    RecordType.BLOOD_PRESSURE: BloodPressureData,
    RecordType.SUGAR_LEVEL: SugarLevelData,
    RecordType.BABY_MOVEMENT: BabyMovementData,
}

# Whole-collection codec used by the record store
health_record_list_adapter: TypeAdapter[List[HealthRecord]] = TypeAdapter(List[HealthRecord])
