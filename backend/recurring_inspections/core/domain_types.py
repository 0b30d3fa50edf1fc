"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ScheduleId, InspectionId wrap UUIDs — never use bare UUID in domain logic
    - DayOfMonth is bounded 1–31, DayOfWeek is bounded 0–6 (Sunday=0)
    - Frequency is a closed set of 5 values — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

ScheduleId = NewType("ScheduleId", UUID)
InspectionId = NewType("InspectionId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

DayOfMonth = NewType("DayOfMonth", int)   # 1–31
DayOfWeek = NewType("DayOfWeek", int)     # 0–6, Sunday=0

MIN_DAY_OF_MONTH: int = 1
MAX_DAY_OF_MONTH: int = 31
MIN_DAY_OF_WEEK: int = 0
MAX_DAY_OF_WEEK: int = 6


# ─── Enums ───────────────────────────────────────────────────────

class Frequency(str, Enum):
    """Recurrence frequency — maps to the `frequency` column of a schedule."""
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    YEARLY = "YEARLY"


class InspectionStatus(str, Enum):
    """Status given to inspections materialized from a schedule."""
    SCHEDULED = "SCHEDULED"
