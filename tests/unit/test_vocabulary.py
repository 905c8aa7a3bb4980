from __future__ import annotations

import pytest

from entry_validator.models.vocabulary import DEFAULT_VOCABULARY, Vocabulary


def test_default_table_sizes():
    assert len(DEFAULT_VOCABULARY.motives) == 6
    assert len(DEFAULT_VOCABULARY.document_types) == 8
    assert len(DEFAULT_VOCABULARY.districts) == 19
    assert len(DEFAULT_VOCABULARY.divisions) == 4
    assert (DEFAULT_VOCABULARY.priority_yes, DEFAULT_VOCABULARY.priority_no) == ("SI", "NO")


def test_priority_motives_are_the_first_four():
    assert DEFAULT_VOCABULARY.priority_motives == (
        "1. PERSONA MAYOR DE 60 AÑOS",
        "2. PERSONA CON ENFERMEDAD CRÓNICA",
        "3. PERSONA CON DISCAPACIDAD",
        "4. GESTANTE",
    )
    assert not DEFAULT_VOCABULARY.is_priority_motive("5. USUARIO QUE INTERPUSO PQRS")
    assert not DEFAULT_VOCABULARY.is_priority_motive("6. OTRO")


def test_allows_checks_membership():
    assert DEFAULT_VOCABULARY.allows("district", "CIUDAD BOLÍVAR")
    assert not DEFAULT_VOCABULARY.allows("district", "CIUDAD BOLIVAR")
    assert DEFAULT_VOCABULARY.allows("document type", "PEP")


def test_with_overrides_replaces_tables():
    vocab = DEFAULT_VOCABULARY.with_overrides({"document_types": ["CC", "NIT"], "priority_no": "N"})

    assert vocab.document_types == ("CC", "NIT")
    assert vocab.allows("document type", "NIT")
    assert not vocab.allows("document type", "TI")
    assert vocab.priority_no == "N"
    # untouched tables keep their defaults
    assert vocab.districts == DEFAULT_VOCABULARY.districts
    # the default instance is not mutated
    assert not DEFAULT_VOCABULARY.allows("document type", "NIT")


def test_with_overrides_empty_returns_same_instance():
    assert DEFAULT_VOCABULARY.with_overrides(None) is DEFAULT_VOCABULARY
    assert DEFAULT_VOCABULARY.with_overrides({}) is DEFAULT_VOCABULARY


def test_with_overrides_unknown_table():
    with pytest.raises(TypeError):
        DEFAULT_VOCABULARY.with_overrides({"colors": ["RED"]})


def test_equality_ignores_lookup_cache():
    assert Vocabulary() == DEFAULT_VOCABULARY
    assert hash(Vocabulary()) == hash(DEFAULT_VOCABULARY)
