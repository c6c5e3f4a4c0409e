"""
Pydantic schemas for the patient a dashboard is rendered for.

Patients are owned by the caller; the tracker only reads them.
"""
from datetime import date
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from maternal_svc.core.datetime_utils import parse_date


class EmergencyContact(BaseModel):
    """Emergency contact, passed through to the overview untouched."""

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    name: str = Field(..., min_length=1, examples=["Dr. Amina Yusuf"])
    relationship: Optional[str] = Field(None, examples=["Midwife"])
    phone: Optional[str] = Field(None, examples=["+44 20 7946 0000"])


class Patient(BaseModel):
    """
    Patient whose records are being tracked.

    ``due_date`` accepts ISO dates ("2025-03-01") or day-first dates ("01/03/2025");
    a blank string means the due date has not been set.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(..., min_length=1, description="Opaque unique patient identifier", examples=["p-1"])
    name: str = Field(..., min_length=1, examples=["Jane Doe"])
    due_date: Optional[date] = Field(None, description="Expected delivery date")
    current_week: Optional[int] = Field(None, ge=0, description="Current gestational week", examples=[20])
    emergency_contacts: Tuple[EmergencyContact, ...] = Field(default=())

    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, value):
        return parse_date(value)
