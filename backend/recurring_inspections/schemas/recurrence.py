"""Recurrence Schemas — Pydantic models with field-level validation for application input.

Invariants:
    - RecurrenceRuleInput coerces loose input ("2" -> 2, "2024-01-31" -> date) then builds
      the rule through core create_rule, so both paths enforce the same invariants
    - Empty strings for optional fields mean "unset"; day_of_week=0 stays Sunday
    - validate_input() never leaks pydantic.ValidationError: it raises RuleValidationError or
      InvalidFrequencyError from core/errors.py
    - RecurrenceUpdate distinguishes "field omitted" from "field explicitly cleared"
    - RecurrenceUpdate.is_active pauses or resumes; it never counts as a recurrence change

Design Decisions:
    - Frequency parsed case-insensitively in a before-validator: matches parse_frequency()
    - PreviewEntry.type is copied verbatim from the schedule or request, never computed
"""

from datetime import date, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from recurring_inspections.core.domain_types import (
    Frequency,
    MIN_DAY_OF_MONTH, MAX_DAY_OF_MONTH, MIN_DAY_OF_WEEK, MAX_DAY_OF_WEEK,
)
from recurring_inspections.core.errors import (
    InvalidFrequencyError, RuleValidationError, SchedulerError,
)
from recurring_inspections.core.recurrence_rule import RecurrenceRule, create_rule


ModelT = TypeVar("ModelT", bound=BaseModel)

RECURRENCE_FIELDS: frozenset[str] = frozenset({
    "frequency", "interval", "start_date", "day_of_month", "day_of_week",
})


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


def _upper_frequency(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip().upper()
    return v


def _domain_error(exc: ValidationError, data: dict) -> SchedulerError:
    """Translate the first pydantic error into the scheduler error hierarchy."""
    first = exc.errors()[0]
    field = str(first["loc"][0]) if first["loc"] else "input"
    if field == "frequency" and first["type"] != "missing":
        return InvalidFrequencyError(data.get("frequency"))
    return RuleValidationError(f"{field}: {first['msg']}", field)


def validate_input(model: type[ModelT], data: dict) -> ModelT:
    """model.model_validate(data), raising scheduler errors instead of pydantic's."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise _domain_error(exc, data) from exc


class RecurrenceRuleInput(BaseModel):
    """Recurrence fields as received from the application (form/JSON payload)."""
    frequency: Frequency
    interval: int = Field(ge=1)
    start_date: date
    end_date: date | None = None
    day_of_month: int | None = Field(None, ge=MIN_DAY_OF_MONTH, le=MAX_DAY_OF_MONTH)
    day_of_week: int | None = Field(None, ge=MIN_DAY_OF_WEEK, le=MAX_DAY_OF_WEEK)

    @field_validator("frequency", mode="before")
    @classmethod
    def normalize_frequency(cls, v: Any) -> Any:
        return _upper_frequency(v)

    @field_validator("end_date", "day_of_month", "day_of_week", mode="before")
    @classmethod
    def blank_is_unset(cls, v: Any) -> Any:
        return _blank_to_none(v)

    def to_rule(self) -> RecurrenceRule:
        return create_rule(
            frequency=self.frequency,
            interval=self.interval,
            start_date=self.start_date,
            end_date=self.end_date,
            day_of_month=self.day_of_month,
            day_of_week=self.day_of_week,
        )

    @classmethod
    def parse_rule(cls, data: dict) -> RecurrenceRule:
        """Validate raw input and build a RecurrenceRule in one step."""
        return validate_input(cls, data).to_rule()


class PreviewRequest(RecurrenceRuleInput):
    """Preview of a not-yet-saved schedule. count is clamped by the preview service."""
    count: int | None = None
    title: str = Field("Preview Inspection", max_length=200)
    inspection_type: str = Field("ROUTINE", alias="type", max_length=50)

    model_config = {"populate_by_name": True}


class RecurrenceUpdate(BaseModel):
    """Partial edit of a schedule's recurrence. Omitted fields keep their value."""
    frequency: Frequency | None = None
    interval: int | None = Field(None, ge=1)
    start_date: date | None = None
    end_date: date | None = None
    day_of_month: int | None = Field(None, ge=MIN_DAY_OF_MONTH, le=MAX_DAY_OF_MONTH)
    day_of_week: int | None = Field(None, ge=MIN_DAY_OF_WEEK, le=MAX_DAY_OF_WEEK)
    is_active: bool | None = None

    @field_validator("frequency", mode="before")
    @classmethod
    def normalize_frequency(cls, v: Any) -> Any:
        return _upper_frequency(v)

    @field_validator("end_date", "day_of_month", "day_of_week", mode="before")
    @classmethod
    def blank_is_unset(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @property
    def recurrence_changed(self) -> bool:
        """True when next_due_date must be re-anchored (end_date alone does not)."""
        return bool(RECURRENCE_FIELDS & self.model_fields_set)

    def merge_into(self, rule: RecurrenceRule) -> RecurrenceRule:
        """Apply provided fields over rule and re-validate the result."""
        provided = self.model_fields_set

        def pick(name: str) -> Any:
            return getattr(self, name) if name in provided else getattr(rule, name)

        return create_rule(
            frequency=self.frequency or rule.frequency,
            interval=self.interval if self.interval is not None else rule.interval,
            start_date=self.start_date or rule.start_date,
            end_date=pick("end_date"),
            day_of_month=pick("day_of_month"),
            day_of_week=pick("day_of_week"),
        )


class PreviewEntry(BaseModel):
    """One upcoming occurrence decorated with pass-through schedule metadata."""
    scheduled_date: date | datetime
    title: str
    type: str


class PreviewResponse(BaseModel):
    previews: list[PreviewEntry]
