"""
Builds health records from raw form input.

Form widgets hand over text ("120", " 95.5 ", ""), but callers may also pass
numbers they already coerced. Either way every value is re-validated here so
that nothing malformed (NaN, "abc", 120.5 for an integer field) is persisted.

Field names follow the persisted camelCase form (``heartRate``, ``testType``);
snake_case spellings are accepted too.
"""
import logging
import math
import re
import threading
import time
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from maternal_svc.core.datetime_utils import to_utc, utc_now
from maternal_svc.core.exceptions import ValidationError
from maternal_svc.core.record_types import RecordType, SugarTestType
from maternal_svc.schemas.health_record import PAYLOAD_MODELS, RECORD_MODELS, HealthRecord

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")

# Form fields per record type: name -> (parser kind, required)
_FORM_FIELDS: Dict[RecordType, Dict[str, tuple]] = {
    RecordType.BLOOD_PRESSURE: {
        "systolic": ("int", True),
        "diastolic": ("int", True),
        "heartRate": ("int", False),
        "notes": ("text", False),
    },
    RecordType.SUGAR_LEVEL: {
        "level": ("decimal", True),
        "testType": ("test_type", False),
        "notes": ("text", False),
    },
    RecordType.BABY_MOVEMENT: {
        "count": ("int", True),
        "duration": ("int", True),
        "notes": ("text", False),
    },
}

DEFAULT_TEST_TYPE = SugarTestType.RANDOM


class RecordIdGenerator:
    """
    Issues record IDs from the millisecond clock.

    IDs are strictly increasing within the process, so two records created in
    the same millisecond still sort in creation order.
    """

    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._clock = clock or (lambda: time.time_ns() // 1_000_000)
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            candidate = max(self._clock(), self._last + 1)
            self._last = candidate
        # Zero-padded so lexical order matches numeric order
        return f"{candidate:013d}"


# Shared by every factory built without an explicit generator, so IDs stay unique per process
default_id_generator = RecordIdGenerator()


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_int(field: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError(field=field, value=value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        raise ValidationError(field=field, value=value)
    if isinstance(value, str) and _INTEGER_RE.match(value.strip()):
        return int(value.strip())
    raise ValidationError(field=field, value=value)


def _parse_decimal(field: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError(field=field, value=value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        if not _DECIMAL_RE.match(value.strip()):
            raise ValidationError(field=field, value=value)
        number = float(value.strip())
    else:
        raise ValidationError(field=field, value=value)

    if not math.isfinite(number):
        raise ValidationError(field=field, value=value)
    return number


def _parse_test_type(field: str, value: Any) -> SugarTestType:
    try:
        return SugarTestType(value.strip() if isinstance(value, str) else value)
    except ValueError:
        allowed = ", ".join(t.value for t in SugarTestType)
        raise ValidationError(
            f"Invalid value for '{field}': {value!r} (expected one of {allowed})",
            field=field,
            value=value,
        ) from None


def _parse_text(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(field=field, value=value)
    # Kept verbatim, an empty string stays an empty string
    return value


_PARSERS = {
    "int": _parse_int,
    "decimal": _parse_decimal,
    "test_type": _parse_test_type,
    "text": _parse_text,
}


def _camel_to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


class RecordFactory:
    """
    Validates raw form fields and stamps new records with an ID and creation time.
    """

    def __init__(
        self,
        id_generator: Optional[RecordIdGenerator] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Args:
            id_generator: Source of record IDs. Defaults to the process-wide generator.
            clock: Returns the creation timestamp; injectable for tests.
        """
        self._ids = id_generator or default_id_generator
        self._clock = clock

    def parse_fields(
        self,
        record_type: Union[RecordType, str],
        raw_fields: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """
        Turn raw form values into typed payload values.

        Raises:
            ValidationError: On an unknown record type, an unknown field, a missing
                required value or a value that does not parse.
        """
        try:
            record_type = RecordType(record_type)
        except ValueError:
            raise ValidationError(field="type", value=record_type) from None

        spec = _FORM_FIELDS[record_type]
        snake_names = {_camel_to_snake(name): name for name in spec}

        values: Dict[str, Any] = {}
        for raw_name, raw_value in raw_fields.items():
            name = raw_name if raw_name in spec else snake_names.get(raw_name)
            if name is None:
                raise ValidationError(
                    f"Field '{raw_name}' does not belong to a {record_type.value} record",
                    field=raw_name,
                    value=raw_value,
                )
            values[name] = raw_value

        parsed: Dict[str, Any] = {}
        for name, (kind, required) in spec.items():
            raw_value = values.get(name)
            if kind == "text":
                if raw_value is not None:
                    parsed[name] = _PARSERS[kind](name, raw_value)
                continue
            if _is_blank(raw_value):
                if required:
                    raise ValidationError(f"'{name}' is required", field=name, value=raw_value)
                if kind == "test_type":
                    parsed[name] = DEFAULT_TEST_TYPE
                continue
            parsed[name] = _PARSERS[kind](name, raw_value)

        return parsed

    def build(
        self,
        patient_id: str,
        record_type: Union[RecordType, str],
        raw_fields: Mapping[str, Any],
    ) -> HealthRecord:
        """
        Create a new record for a patient.

        Args:
            patient_id: Owner of the record.
            record_type: One of blood_pressure, sugar_level, baby_movement.
            raw_fields: Form values keyed by field name.

        Returns:
            A frozen HealthRecord whose payload matches its type.

        Raises:
            ValidationError: If any field is missing, malformed or out of range.
        """
        if not isinstance(patient_id, str) or _is_blank(patient_id):
            raise ValidationError("Patient ID is required", field="patientId", value=patient_id)

        parsed = self.parse_fields(record_type, raw_fields)
        record_type = RecordType(record_type)

        try:
            payload = PAYLOAD_MODELS[record_type].model_validate(parsed)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            logger.warning(
                "Record payload rejected",
                extra={"record_type": record_type.value, "field": field, "reason": first["msg"]},
            )
            raise ValidationError(
                f"Invalid value for '{field}': {first['msg']}",
                field=field,
                value=first.get("input"),
            ) from e

        record = RECORD_MODELS[record_type](
            id=self._ids.next_id(),
            patient_id=patient_id,
            date=to_utc(self._clock()),
            data=payload,
        )
        logger.debug("Record built", extra={"record_id": record.id, "record_type": record_type.value})
        return record
