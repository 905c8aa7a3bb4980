from __future__ import annotations

from dataclasses import dataclass, field

from .vocabulary import DEFAULT_VOCABULARY, Vocabulary

"""Config dataclasses for the entry validator.

These are the resolved settings after merging defaults, the YAML file,
environment variables and CLI flags (see ``config.loader``).
"""

__all__ = [
    "DEFAULT_WORKERS",
    "DEFAULT_QUEUE_SIZE",
    "DEFAULT_OUTPUT",
    "ERROR_FORMATS",
    "ValidatorConfig",
]

DEFAULT_WORKERS = 10
DEFAULT_QUEUE_SIZE = 100
DEFAULT_OUTPUT = "errors.txt"
ERROR_FORMATS = ("text", "jsonl")


@dataclass(frozen=True)
class ValidatorConfig:
    """Root configuration object for one validation run.

    ``workers`` and ``queue_size`` size the pipeline; ``output`` and
    ``error_format`` describe the error sink; ``vocabulary`` holds the
    categorical tables checked by the validator.
    """
    workers: int = DEFAULT_WORKERS  # Worker pool size (no upper bound enforced)
    queue_size: int = DEFAULT_QUEUE_SIZE  # Bounded input queue capacity
    output: str = DEFAULT_OUTPUT  # Error report destination (append mode)
    error_format: str = "text"  # text | jsonl
    sort_errors: bool = False  # Stable sort of the report by (page, line)
    vocabulary: Vocabulary = field(default=DEFAULT_VOCABULARY)
