from __future__ import annotations

from gadm_ontology.cleaning import clean_text, split_synonyms


def test_clean_text_trims_and_normalises() -> None:
    decomposed = "  Bogotá \n"
    assert clean_text(decomposed) == "Bogot\u00e1"


def test_clean_text_handles_missing_values() -> None:
    assert clean_text(None) == ""
    assert clean_text(float("nan")) == ""


def test_clean_text_decodes_bytes() -> None:
    assert clean_text("São Paulo".encode("utf-8")) == "São Paulo"
    assert clean_text("Zürich".encode("latin-1")) == "Zürich"


def test_split_synonyms_on_pipes() -> None:
    assert split_synonyms("Luanda | Loanda|  São Paulo da Assunção ") == [
        "Luanda",
        "Loanda",
        "São Paulo da Assunção",
    ]


def test_split_synonyms_drops_empty_entries() -> None:
    assert split_synonyms("") == []
    assert split_synonyms(None) == []
    assert split_synonyms("A||B|") == ["A", "B"]
