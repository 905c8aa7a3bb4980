from __future__ import annotations

from dataclasses import dataclass
from datetime import date

"""Entry model: a fully parsed and validated medicine delivery record.

Entries are only ever constructed by ``validation.parser.parse_entry``, which
runs the validator before returning, so an Entry observed by a consumer has
passed every rule.
"""

__all__ = [
    "Entry",
]


@dataclass(frozen=True)
class Entry:
    """Validated record derived from one Row (15 semantic fields)."""
    first_name: str  # mandatory
    second_name: str
    first_last_name: str  # mandatory
    second_last_name: str
    birth_date: date
    medicine: str
    medicine_given: date
    motive: str
    document_type: str
    document_number: str  # ASCII alphanumeric only
    address: str
    district: str
    division: str
    medicine_order: date
    has_priority: bool

    @property
    def full_name(self) -> str:
        parts = (self.first_name, self.second_name, self.first_last_name, self.second_last_name)
        return " ".join(p for p in parts if p)
