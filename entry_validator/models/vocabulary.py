from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

"""Categorical vocabularies for Entry validation.

The allowed values are externally sourced Spanish labels, so they are kept as
plain data (tuples of strings checked by membership) instead of enums. A
config file may override any of the tables without touching validation code.
"""

__all__ = [
    "Vocabulary",
    "DEFAULT_VOCABULARY",
]

MOTIVES: tuple[str, ...] = (
    "1. PERSONA MAYOR DE 60 AÑOS",
    "2. PERSONA CON ENFERMEDAD CRÓNICA",
    "3. PERSONA CON DISCAPACIDAD",
    "4. GESTANTE",
    "5. USUARIO QUE INTERPUSO PQRS",
    "6. OTRO",
)

# Motives that entitle an entry to priority (elderly, chronic, disabled, pregnant)
PRIORITY_MOTIVES: tuple[str, ...] = MOTIVES[:4]

DOCUMENT_TYPES: tuple[str, ...] = ("CC", "TI", "RC", "CE", "PEP", "DNI", "SCR", "PA")

DISTRICTS: tuple[str, ...] = (
    "USAQUÉN",
    "CHAPINERO",
    "SANTA FE",
    "SAN CRISTÓBAL",
    "USME",
    "KENNEDY",
    "FONTIBÓN",
    "ENGATIVÁ",
    "SUBA",
    "BARRIOS UNIDOS",
    "TEUSAQUILLO",
    "LOS MARTIRES",
    "ANTONIO NARINO",
    "PUENTE ARANDA",
    "LA CANDELARIA",
    "RAFAEL URIBE URIBE",
    "CIUDAD BOLÍVAR",
    "SUMAPAZ",
    "BOSA",
)

DIVISIONS: tuple[str, ...] = ("NORTE", "SUR", "SUR OCCIDENTE", "CENTRO ORIENTE")

PRIORITY_YES = "SI"
PRIORITY_NO = "NO"


@dataclass(frozen=True)
class Vocabulary:
    """Allowed values for the categorical Entry fields.

    Order of each table is preserved so error messages list the allowed
    values deterministically.
    """
    motives: tuple[str, ...] = MOTIVES
    priority_motives: tuple[str, ...] = PRIORITY_MOTIVES
    document_types: tuple[str, ...] = DOCUMENT_TYPES
    districts: tuple[str, ...] = DISTRICTS
    divisions: tuple[str, ...] = DIVISIONS
    priority_yes: str = PRIORITY_YES
    priority_no: str = PRIORITY_NO
    _lookup: dict[str, frozenset[str]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        # frozen: populate the membership cache through object.__setattr__
        object.__setattr__(
            self,
            "_lookup",
            {
                "motive": frozenset(self.motives),
                "priority_motive": frozenset(self.priority_motives),
                "document type": frozenset(self.document_types),
                "district": frozenset(self.districts),
                "division": frozenset(self.divisions),
            },
        )

    def allows(self, kind: str, value: str) -> bool:
        """Return True if ``value`` belongs to the table named ``kind``."""
        return value in self._lookup[kind]

    def is_priority_motive(self, motive: str) -> bool:
        return motive in self._lookup["priority_motive"]

    def with_overrides(self, overrides: dict[str, Any] | None) -> Vocabulary:
        """Return a copy with the given tables replaced.

        Args:
            overrides: Mapping of field name -> list of labels (or a single
                token for ``priority_yes`` / ``priority_no``)

        Returns:
            New Vocabulary; unknown keys raise ``TypeError`` from ``replace``
        """
        if not overrides:
            return self
        changes: dict[str, Any] = {}
        for key, value in overrides.items():
            if isinstance(value, (list, tuple)):
                changes[key] = tuple(str(v) for v in value)
            else:
                changes[key] = str(value)
        return replace(self, **changes)


DEFAULT_VOCABULARY = Vocabulary()
