from __future__ import annotations

import re

from ..models.entry import Entry
from ..models.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from .errors import (
    EntryError,
    MissingNameError,
    NotAlphanumericError,
    NotInVocabularyError,
    PriorityMismatchError,
)

"""Entry validation rules.

Rules are evaluated in a fixed order and the first violation wins, so the
reported message for a given record is deterministic:

1. first given name and first family name non-empty
2. motive in vocabulary
3. document type in vocabulary
4. district in vocabulary
5. division in vocabulary
6. document number ASCII alphanumeric (non-empty)
7. priority flag consistent with motive

Validation is pure: no shared state, safe to call from any worker thread.
"""

__all__ = [
    "validate_entry",
    "first_violation",
]

# ASCII only; str.isalnum() would also accept Unicode letters and digits
_ALPHANUMERIC = re.compile(r"[A-Za-z0-9]+")


def first_violation(entry: Entry, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> EntryError | None:
    """Return the first rule ``entry`` violates, or None when it is valid.

    Args:
        entry: Assembled record to check
        vocabulary: Categorical tables to check membership against

    Returns:
        The violation as an ``EntryError`` instance (not raised), or None
    """
    if not entry.first_name or not entry.first_last_name:
        return MissingNameError()

    categorical = (
        ("motive", entry.motive, vocabulary.motives),
        ("document type", entry.document_type, vocabulary.document_types),
        ("district", entry.district, vocabulary.districts),
        ("division", entry.division, vocabulary.divisions),
    )
    for field_name, value, allowed in categorical:
        if not vocabulary.allows(field_name, value):
            return NotInVocabularyError(field_name, value, allowed)

    if not _ALPHANUMERIC.fullmatch(entry.document_number):
        return NotAlphanumericError("document number", entry.document_number)

    must_have_priority = vocabulary.is_priority_motive(entry.motive)
    if must_have_priority != entry.has_priority:
        return PriorityMismatchError(entry.motive, expected=must_have_priority)

    return None


def validate_entry(entry: Entry, vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> None:
    """Raise the first rule violation of ``entry``; return None when valid.

    Raises:
        EntryError: subclass describing the violated rule
    """
    violation = first_violation(entry, vocabulary)
    if violation is not None:
        raise violation
