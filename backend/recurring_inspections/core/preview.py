"""Preview Generator — projects upcoming occurrences of a rule without touching state.

Invariants:
    - First emitted date is start_from itself (no pre-advance)
    - Each following date is advance(rule, previous)
    - Stops before a date whose calendar day is strictly after rule.end_date
      (a date equal to end_date is included)
    - Recomputed on every call — no cursor, two identical calls return identical lists
    - count <= 0 returns an empty list

Design Decisions:
    - iter_occurrences is a generator bounded only by end_date: callers that need a
      hard ceiling use preview() or itertools.islice (ADR: caller bounds open-ended rules)
    - Occurrence carries only scheduled_date; title/type decoration belongs to the shell
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date
from itertools import islice

from recurring_inspections.core.date_advancer import advance
from recurring_inspections.core.recurrence_rule import RecurrenceRule, is_past_end


@dataclass(frozen=True)
class Occurrence:
    """A single concrete scheduled date produced by a rule."""
    scheduled_date: date


def iter_occurrences(rule: RecurrenceRule, start_from: date) -> Iterator[Occurrence]:
    """Lazily yield occurrences from start_from until end_date is passed."""
    current = start_from
    while not is_past_end(rule, current):
        yield Occurrence(scheduled_date=current)
        current = advance(rule, current)


def preview(rule: RecurrenceRule, start_from: date, count: int) -> list[Occurrence]:
    """Return up to count occurrences beginning at start_from."""
    if count <= 0:
        return []
    return list(islice(iter_occurrences(rule, start_from), count))
