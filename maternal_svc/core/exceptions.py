"""
Shared exception classes for the maternal health tracker.

This module provides:
- Custom exception hierarchy for domain-specific errors
- Consistent error payload formatting via to_dict()

Usage:
    from maternal_svc.core.exceptions import ValidationError, PersistenceError

    # In service layer - raise domain exceptions
    raise ValidationError(field="systolic", value="abc")

    # At the controller boundary - convert to a typed result
    except HealthTrackerError as exc:
        return SubmissionResult.failure(exc)
"""
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION CLASS
# =============================================================================

class HealthTrackerError(Exception):
    """
    Base exception for all health tracker domain errors.

    All custom exceptions should inherit from this class.
    Provides consistent error structure with a detail message and context.
    """

    detail: str = "An unexpected error occurred"
    recoverable: bool = True

    def __init__(self, detail: Optional[str] = None, **kwargs: Any):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            **kwargs: Additional context to include in the error payload.
        """
        self.detail = detail or self.__class__.detail
        self.context = kwargs
        super().__init__(self.detail)

    @property
    def error_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for the caller."""
        result = {"error": self.error_type, "detail": self.detail}
        if self.context:
            result["context"] = self.context
        return result


# =============================================================================
# RECORD EXCEPTIONS
# =============================================================================

class ValidationError(HealthTrackerError):
    """Raised when form input cannot be turned into a valid health record."""

    detail = "Invalid record data"

    def __init__(
        self,
        detail: Optional[str] = None,
        field: Optional[str] = None,
        value: Any = None,
        **kwargs: Any
    ):
        if detail is None and field:
            detail = f"Invalid value for '{field}': {value!r}"
        super().__init__(detail=detail, field=field, value=value, **kwargs)
        self.field = field
        self.value = value


class InvariantViolation(HealthTrackerError):
    """
    Raised when a record reaching the view layer breaks the schema guarantees.

    Indicates a defect in the tracker itself rather than bad user input.
    """

    detail = "Health record violates its schema"
    recoverable = False

    def __init__(self, detail: Optional[str] = None, record_id: Optional[str] = None, **kwargs: Any):
        super().__init__(detail=detail, record_id=record_id, **kwargs)
        self.record_id = record_id


# =============================================================================
# PATIENT EXCEPTIONS
# =============================================================================

class PatientNotFoundError(HealthTrackerError):
    """Raised when a patient is not known to the patient directory."""

    detail = "Patient not found"

    def __init__(self, patient_id: Optional[str] = None, **kwargs: Any):
        detail = f"Patient '{patient_id}' not found" if patient_id else self.detail
        super().__init__(detail=detail, patient_id=patient_id, **kwargs)


# =============================================================================
# STORAGE EXCEPTIONS
# =============================================================================

class PersistenceError(HealthTrackerError):
    """Raised when the durable store cannot be read or written."""

    detail = "Storage operation failed"

    def __init__(self, operation: Optional[str] = None, key: Optional[str] = None, **kwargs: Any):
        detail = kwargs.pop("detail", None)
        if detail is None:
            detail = f"Storage error during {operation}" if operation else self.detail
        super().__init__(detail=detail, operation=operation, key=key, **kwargs)
        self.operation = operation
        self.key = key
