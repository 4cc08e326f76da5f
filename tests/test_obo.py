from __future__ import annotations

import io
from datetime import datetime
from pathlib import Path

from gadm_ontology.obo import export_obo, format_term, iter_obo_lines, write_obo
from gadm_ontology.terms import Definition, TermStore


def _store() -> TermStore:
    store = TermStore()
    earth, _ = store.get_or_create_grouping_term("Earth")
    country = store.create_term("Côte d'Ivoire", source_id="CIV", level=0, alt_id="GADM:CIV")
    country.definition = Definition("Country", "GADM:CIV")
    country.add_synonym('Ivory "Coast"', "GADM:CIV")
    store.add_is_a(country, earth)
    return store


def test_write_obo_emits_header_terms_and_typedef() -> None:
    buffer = io.StringIO()
    write_obo(
        _store(),
        buffer,
        default_namespace="VBGEO",
        ontology_name="Database of Global Administrative Areas",
        date=datetime(2024, 3, 5, 9, 7),
    )
    text = buffer.getvalue()

    assert text.startswith("format-version: 1.2\ndate: 05:03:2024 09:07\ndefault-namespace: VBGEO\n")
    assert "remark: Database of Global Administrative Areas\n" in text
    assert (
        "[Term]\n"
        "id: VBGEO:0000002\n"
        "name: Côte d'Ivoire\n"
        "alt_id: GADM:CIV\n"
        'def: "Country" [GADM:CIV]\n'
        'synonym: "Ivory \\"Coast\\"" EXACT [GADM:CIV]\n'
        "is_a: VBGEO:0000001 ! Earth\n"
    ) in text
    assert text.endswith("[Typedef]\nid: is_a\nname: is_a\n")


def test_terms_without_attributes_have_minimal_stanza() -> None:
    lines = list(iter_obo_lines(_store(), default_namespace="VBGEO"))
    start = lines.index("[Term]")
    assert lines[start : start + 3] == ["[Term]", "id: VBGEO:0000001", "name: Earth"]
    assert lines[start + 3] == ""
    assert not any(line.startswith("date:") for line in lines)


def test_export_obo_writes_file(tmp_path: Path) -> None:
    target = export_obo(_store(), tmp_path / "out" / "gadm.obo", default_namespace="VBGEO")
    content = target.read_text(encoding="utf-8")
    assert "name: Côte d'Ivoire" in content


def test_names_escape_comment_and_modifier_characters() -> None:
    store = TermStore()
    region, _ = store.get_or_create_grouping_term("Hey! {North}")
    town = store.create_term("Back\\slash ! town", source_id="X.1", level=1)
    store.add_is_a(town, region)

    lines = format_term(town, store)

    assert "name: Back\\\\slash \\! town" in lines
    assert "is_a: VBGEO:0000001 ! Hey\\! \\{North\\}" in lines
    assert format_term(region, store)[2] == "name: Hey\\! \\{North\\}"
