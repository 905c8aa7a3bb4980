from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

from ..models.entry import Entry
from ..models.row import ROW_WIDTH
from ..models.vocabulary import DEFAULT_VOCABULARY, Vocabulary
from .errors import BadDateError, MalformedRowError
from .validator import validate_entry

"""Entry parsing: raw row cells -> validated Entry.

Column layout (0-based):
    0 first name          5 medicine            10 address
    1 second name         6 medicine given      11 district
    2 first last name     7 motive              12 division
    3 second last name    8 document type       13 medicine order
    4 birth date          9 document number     14 has priority

Parsing and validation are one step: ``parse_entry`` never returns a record
that has not passed ``validate_entry``.
"""

__all__ = [
    "DATE_FORMAT",
    "parse_date",
    "parse_entry",
]

DATE_FORMAT = "%d/%m/%Y"  # day/month/4-digit-year, 1 or 2 digit day and month

BIRTH_DATE_COL = 4
MEDICINE_GIVEN_COL = 6
MEDICINE_ORDER_COL = 13


def parse_date(cells: Sequence[str], index: int) -> date:
    """Parse the date cell at ``index`` (surrounding whitespace ignored).

    Raises:
        BadDateError: if the cell does not match ``DATE_FORMAT``
    """
    raw = cells[index]
    try:
        return datetime.strptime(raw.strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise BadDateError(index, raw) from e


def parse_entry(cells: Sequence[str], vocabulary: Vocabulary = DEFAULT_VOCABULARY) -> Entry:
    """Build and validate an Entry from one row's raw cells.

    Args:
        cells: Raw text cells; exactly ``ROW_WIDTH`` are required
        vocabulary: Categorical tables used by the validator and the
            affirmative priority token

    Returns:
        Validated Entry

    Raises:
        MalformedRowError: wrong number of cells (checked before anything else)
        BadDateError: a date cell does not parse
        EntryError: any validation rule failed (see ``validator``)
    """
    if len(cells) != ROW_WIDTH:
        raise MalformedRowError(ROW_WIDTH, len(cells))

    birth_date = parse_date(cells, BIRTH_DATE_COL)
    medicine_order = parse_date(cells, MEDICINE_ORDER_COL)
    medicine_given = parse_date(cells, MEDICINE_GIVEN_COL)

    text = [c.strip() for c in cells]
    entry = Entry(
        first_name=text[0],
        second_name=text[1],
        first_last_name=text[2],
        second_last_name=text[3],
        birth_date=birth_date,
        medicine=text[5],
        medicine_given=medicine_given,
        motive=text[7],
        document_type=text[8],
        document_number=text[9],
        address=text[10],
        district=text[11],
        division=text[12],
        medicine_order=medicine_order,
        # Anything other than the affirmative token (including junk) means no priority
        has_priority=text[14] == vocabulary.priority_yes,
    )

    validate_entry(entry, vocabulary)
    return entry
