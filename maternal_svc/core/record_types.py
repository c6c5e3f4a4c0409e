"""
Record type catalogue - single source of truth for health record type metadata.

This module provides:
- RecordType / SugarTestType enums for the closed set of record variants
- YAML-based loading and validation of per-type display metadata
- RecordTypeDefinition dataclass with label, unit and colour
- Test-type label lookup for sugar level readings

YAML access is encapsulated here - no other module should read record_types.yaml directly.

Usage:
    from maternal_svc.core.record_types import RecordType, get_record_type, sugar_test_label

    definition = get_record_type(RecordType.BLOOD_PRESSURE)
    definition.label          # "blood pressure"
    sugar_test_label("post_meal")  # "Post-meal"
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import yaml

from maternal_svc.core.exceptions import InvariantViolation

logger = logging.getLogger(__name__)


class RecordType(str, Enum):
    """Closed set of health observation variants."""

    BLOOD_PRESSURE = "blood_pressure"
    SUGAR_LEVEL = "sugar_level"
    BABY_MOVEMENT = "baby_movement"


class SugarTestType(str, Enum):
    """When a blood sugar reading was taken."""

    FASTING = "fasting"
    RANDOM = "random"
    POST_MEAL = "post_meal"


# =============================================================================
# RECORD TYPE DEFINITION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class RecordTypeDefinition:
    """
    Immutable display metadata for one record type.

    Attributes:
        tag: The record type tag stored on every record
        label: Lower-case label used in record lists ("blood pressure")
        title: Title used on "add record" actions ("Blood Pressure")
        unit: Measurement unit
        color: Hex colour code used for the record marker
        description: Short call to action for the "add record" button
    """
    tag: RecordType
    label: str
    title: str
    unit: str
    color: str
    description: str


# =============================================================================
# YAML CONFIGURATION LOADING & VALIDATION
# =============================================================================

def _get_config_path() -> Path:
    """Get the path to the record type configuration file."""
    return Path(__file__).parent / 'record_types.yaml'


def _load_yaml_config() -> Dict[str, Any]:
    """
    Load and parse the YAML configuration file.

    Raises:
        FileNotFoundError: If record_types.yaml is not found
        yaml.YAMLError: If YAML parsing fails
    """
    config_path = _get_config_path()
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except FileNotFoundError:
        logger.error("Record type config file not found", extra={'path': str(config_path)})
        raise
    except yaml.YAMLError as e:
        logger.error("Failed to parse record type config", extra={'path': str(config_path), 'error': str(e)})
        raise


def _validate_entry(raw: Dict[str, Any], index: int) -> None:
    """
    Validate a single record type entry from YAML.

    Raises:
        ValueError: If required fields are missing or invalid
    """
    for field in ('tag', 'label', 'color'):
        if field not in raw:
            raise ValueError(f"Record type at index {index} is missing required field: '{field}'")

    if raw['tag'] not in {t.value for t in RecordType}:
        raise ValueError(f"Record type at index {index} has unknown tag: '{raw['tag']}'")

    color = raw.get('color', '')
    if not re.match(r'^#[0-9A-Fa-f]{6}$', color):
        raise ValueError(f"Record type '{raw['tag']}' has invalid color format: '{color}'")


def _parse_entry(raw: Dict[str, Any]) -> RecordTypeDefinition:
    """Parse a single YAML entry into a RecordTypeDefinition."""
    tag = RecordType(raw['tag'])
    return RecordTypeDefinition(
        tag=tag,
        label=raw['label'],
        title=raw.get('title', raw['label'].title()),
        unit=raw.get('unit', ''),
        color=raw['color'],
        description=raw.get('description', ''),
    )


@lru_cache(maxsize=1)
def _load_catalogue() -> Tuple[Dict[RecordType, RecordTypeDefinition], Dict[SugarTestType, str]]:
    """
    Load and cache the record type catalogue from YAML.

    The catalogue must describe every RecordType exactly once and label every SugarTestType.
    """
    config = _load_yaml_config() or {}

    definitions: Dict[RecordType, RecordTypeDefinition] = {}
    for i, raw in enumerate(config.get('record_types', [])):
        _validate_entry(raw, i)
        definition = _parse_entry(raw)
        if definition.tag in definitions:
            raise ValueError(f"Duplicate record type in catalogue: '{definition.tag.value}'")
        definitions[definition.tag] = definition

    missing = [t.value for t in RecordType if t not in definitions]
    if missing:
        raise ValueError(f"Record type catalogue is missing: {', '.join(missing)}")

    raw_labels = config.get('test_type_labels', {}) or {}
    labels: Dict[SugarTestType, str] = {}
    for test_type in SugarTestType:
        if test_type.value not in raw_labels:
            raise ValueError(f"Test type '{test_type.value}' has no label")
        labels[test_type] = str(raw_labels[test_type.value])

    logger.debug("Record type catalogue loaded", extra={'record_types': len(definitions)})
    return definitions, labels


# =============================================================================
# PUBLIC API
# =============================================================================

def get_record_type(tag: Union[RecordType, str]) -> RecordTypeDefinition:
    """
    Get the catalogue entry for a record type tag.

    Raises:
        InvariantViolation: If the tag is not one of the closed set
    """
    definitions, _ = _load_catalogue()
    try:
        return definitions[RecordType(tag)]
    except ValueError:
        raise InvariantViolation(f"Unknown record type: '{tag}'", record_type=str(tag)) from None


def list_record_types() -> Tuple[RecordTypeDefinition, ...]:
    """List all record type definitions in catalogue order."""
    definitions, _ = _load_catalogue()
    return tuple(definitions.values())


def sugar_test_label(test_type: Union[SugarTestType, str]) -> str:
    """
    Human-readable label for a sugar level test type.

    Raises:
        InvariantViolation: If the test type is unknown
    """
    _, labels = _load_catalogue()
    try:
        return labels[SugarTestType(test_type)]
    except ValueError:
        raise InvariantViolation(f"Unknown test type: '{test_type}'", test_type=str(test_type)) from None
