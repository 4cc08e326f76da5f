from __future__ import annotations

import importlib.util
from pathlib import Path
from typing import Dict, List

import pytest

from gadm_ontology.records import AdministrativeRecord, read_gadm_level

MODULE_PATH = Path(__file__).resolve().parents[1] / "scripts" / "gadm_to_obo.py"
SPEC = importlib.util.spec_from_file_location("gadm_to_obo", MODULE_PATH)
assert SPEC and SPEC.loader
gadm_to_obo = importlib.util.module_from_spec(SPEC)
SPEC.loader.exec_module(gadm_to_obo)

CONTINENTS_OBO = """[Term]
id: G:1
name: Earth

[Term]
id: G:2
name: Africa
is_a: G:1 ! Earth

[Term]
id: G:3
name: Angola
is_a: G:2 ! Africa
"""

ROWS: Dict[int, List[AdministrativeRecord]] = {
    0: [AdministrativeRecord(level=0, source_id="AGO", name="Angola")],
    1: [
        AdministrativeRecord(level=1, source_id="AGO.1_1", parent_id="AGO", name="Bengo", subtype="Province"),
        AdministrativeRecord(level=1, source_id="AGO.2_1", parent_id="AGO", name="Luanda", subtype="Province"),
    ],
    2: [
        AdministrativeRecord(level=2, source_id="AGO.1.1_1", parent_id="AGO.1_1", name="Dande", subtype="Municipality"),
        AdministrativeRecord(level=2, source_id="AGO.2.1_1", parent_id="AGO.2_1", name="Dande", subtype="Municipality"),
    ],
}


@pytest.fixture
def continents_file(tmp_path: Path) -> Path:
    path = tmp_path / "continents.obo"
    path.write_text(CONTINENTS_OBO, encoding="utf-8")
    return path


@pytest.fixture
def fake_levels(monkeypatch: pytest.MonkeyPatch) -> List[tuple]:
    calls: List[tuple] = []

    def fake_read(stem, level, *, suffix=".shp"):
        calls.append((stem, level, suffix))
        return iter(ROWS.get(level, []))

    monkeypatch.setattr(gadm_to_obo, "read_gadm_level", fake_read)
    return calls


def test_main_writes_ontology_to_output(tmp_path: Path, continents_file: Path, fake_levels: List[tuple]) -> None:
    output = tmp_path / "gadm.obo"
    exit_code = gadm_to_obo.main(
        ["gadm36", "--continents-obofile", str(continents_file), "--output", str(output), "--no-date"]
    )

    assert exit_code == 0
    assert fake_levels == [("gadm36", 0, ".shp"), ("gadm36", 1, ".shp"), ("gadm36", 2, ".shp")]
    text = output.read_text(encoding="utf-8")
    assert "date:" not in text
    assert "name: Dande (Bengo)\n" in text
    assert "name: Dande (Luanda)\n" in text
    assert 'def: "Province in Angola" [GADM:AGO.1_1]' in text
    assert "is_a: VBGEO:0000002 ! Africa" in text


def test_main_streams_to_stdout_without_disambiguation(
    continents_file: Path,
    fake_levels: List[tuple],
    capsys: pytest.CaptureFixture[str],
) -> None:
    exit_code = gadm_to_obo.main(
        ["gadm36", "--continents-obofile", str(continents_file), "--no-disambiguate", "--max-level", "2"]
    )

    assert exit_code == 0
    out = capsys.readouterr().out
    assert out.startswith("format-version: 1.2\n")
    assert out.count("name: Dande\n") == 2


def test_main_fails_without_continents(tmp_path: Path, fake_levels: List[tuple]) -> None:
    exit_code = gadm_to_obo.main(["gadm36", "--continents-obofile", str(tmp_path / "missing.obo")])
    assert exit_code == 1
    assert fake_levels == []


def test_config_file_and_overrides(tmp_path: Path, continents_file: Path) -> None:
    config_path = tmp_path / "gadm.yaml"
    config_path.write_text(
        f"max_level: 1\ncontinents_obofile: {continents_file.name}\naccession_prefix: GEO\n",
        encoding="utf-8",
    )
    args = gadm_to_obo.build_parser().parse_args(["gadm36", "--config", str(config_path), "--max-level", "0"])
    config = gadm_to_obo.resolve_config(args)
    assert config.max_level == 0
    assert config.accession_prefix == "GEO"
    assert config.disambiguate is True
    assert Path(config.continents_obofile) == continents_file.resolve()


def test_output_directories_are_created(tmp_path: Path, continents_file: Path, fake_levels: List[tuple]) -> None:
    output = tmp_path / "build" / "nested" / "gadm.obo"
    exit_code = gadm_to_obo.main(
        ["gadm36", "--continents-obofile", str(continents_file), "--output", str(output), "--no-date"]
    )

    assert exit_code == 0
    assert output.read_text(encoding="utf-8").startswith("format-version: 1.2\n")


def test_unreadable_level_file_exits_with_error(
    continents_file: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    def missing_layer(stem, level, *, suffix=".shp"):
        raise OSError(f"{stem}_{level}{suffix}: No such file or directory")

    monkeypatch.setattr(gadm_to_obo, "read_gadm_level", missing_layer)
    exit_code = gadm_to_obo.main(["gadm36", "--continents-obofile", str(continents_file)])

    assert exit_code == 1
    assert "gadm36_0.shp" in caplog.text


def test_row_without_gid_exits_with_error(continents_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def bad_rows(stem, level, *, suffix=".shp"):
        return read_gadm_level(stem, level, suffix=suffix, reader=lambda path: [{"NAME_0": "Nowhere"}])

    monkeypatch.setattr(gadm_to_obo, "read_gadm_level", bad_rows)
    exit_code = gadm_to_obo.main(["gadm36", "--continents-obofile", str(continents_file)])

    assert exit_code == 1
