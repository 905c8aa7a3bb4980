"""Domain models for the spreadsheet entry validator.

Rows flow from the Row Source into the pipeline, which turns each one into
either an Entry or a LinedError.
"""

from .config_models import ValidatorConfig
from .entry import Entry
from .lined_error import LinedError
from .processing_result import RunResult
from .row import ROW_WIDTH, Row
from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

__all__ = [
    # Configuration models
    "ValidatorConfig",
    "Vocabulary",
    "DEFAULT_VOCABULARY",
    # Processing models
    "Row",
    "ROW_WIDTH",
    "Entry",
    "LinedError",
    "RunResult",
]
