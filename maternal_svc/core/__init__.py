"""
Core module for application configuration, logging, and shared constants.

This module provides:
- Settings: Application configuration via pydantic-settings
- Dependency providers: default store and controller construction
- Exceptions: Domain-specific exception classes
- Datetime utilities: UTC-first datetime handling
- Record type catalogue: Display metadata for the record variants
"""
from maternal_svc.core.config import Settings, get_settings, reset_settings

from maternal_svc.core.exceptions import (
    HealthTrackerError,
    InvariantViolation,
    PatientNotFoundError,
    PersistenceError,
    ValidationError,
)

from maternal_svc.core.datetime_utils import (
    format_display_date,
    format_display_time,
    format_iso,
    parse_date,
    parse_datetime,
    to_utc,
    utc_now,
)

from maternal_svc.core.record_types import (
    RecordType,
    RecordTypeDefinition,
    SugarTestType,
    get_record_type,
    list_record_types,
    sugar_test_label,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "reset_settings",
    # Exceptions
    "HealthTrackerError",
    "InvariantViolation",
    "PatientNotFoundError",
    "PersistenceError",
    "ValidationError",
    # Datetime utilities
    "format_display_date",
    "format_display_time",
    "format_iso",
    "parse_date",
    "parse_datetime",
    "to_utc",
    "utc_now",
    # Record types
    "RecordType",
    "RecordTypeDefinition",
    "SugarTestType",
    "get_record_type",
    "list_record_types",
    "sugar_test_label",
]
