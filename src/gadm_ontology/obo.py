"""OBO 1.2 flat-file export of a :class:`~gadm_ontology.terms.TermStore`."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import IO, Iterable, List, Optional

from .terms import Term, TermStore

FORMAT_VERSION = "1.2"
IS_A = "is_a"


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


_UNQUOTED_ESCAPES = {"\\": "\\\\", "\n": "\\n", "!": "\\!", "{": "\\{", "}": "\\}"}


def _escape(value: str) -> str:
    # unquoted values end at a "!" comment or a "{" trailing modifier block
    return "".join(_UNQUOTED_ESCAPES.get(char, char) for char in value)


def _dbxrefs(provenance: Optional[str]) -> str:
    return f"[{provenance}]" if provenance else "[]"


def format_header(
    *,
    default_namespace: str,
    ontology_name: str | None = None,
    date: datetime | None = None,
) -> List[str]:
    lines = [f"format-version: {FORMAT_VERSION}"]
    if date is not None:
        lines.append(f"date: {date.strftime('%d:%m:%Y %H:%M')}")
    lines.append(f"default-namespace: {default_namespace}")
    if ontology_name:
        lines.append(f"remark: {ontology_name}")
    return lines


def format_term(term: Term, store: TermStore) -> List[str]:
    lines = ["[Term]", f"id: {term.accession}", f"name: {_escape(term.name)}"]
    if term.alt_id:
        lines.append(f"alt_id: {term.alt_id}")
    if term.definition is not None:
        lines.append(f"def: {_quote(term.definition.text)} {_dbxrefs(term.definition.provenance)}")
    for synonym in term.synonyms:
        lines.append(f"synonym: {_quote(synonym.text)} {synonym.scope} {_dbxrefs(synonym.provenance)}")
    for parent_accession in term.parents:
        parent = store.get(parent_accession)
        lines.append(f"{IS_A}: {parent.accession} ! {_escape(parent.name)}")
    return lines


def iter_obo_lines(
    store: TermStore,
    *,
    default_namespace: str,
    ontology_name: str | None = None,
    date: datetime | None = None,
) -> Iterable[str]:
    yield from format_header(
        default_namespace=default_namespace,
        ontology_name=ontology_name,
        date=date,
    )
    for term in store:
        yield ""
        yield from format_term(term, store)
    yield ""
    yield "[Typedef]"
    yield f"id: {IS_A}"
    yield f"name: {IS_A}"


def write_obo(
    store: TermStore,
    handle: IO[str],
    *,
    default_namespace: str,
    ontology_name: str | None = None,
    date: datetime | None = None,
) -> None:
    for line in iter_obo_lines(
        store,
        default_namespace=default_namespace,
        ontology_name=ontology_name,
        date=date,
    ):
        handle.write(line)
        handle.write("\n")


def export_obo(
    store: TermStore,
    path: Path,
    *,
    default_namespace: str,
    ontology_name: str | None = None,
    date: datetime | None = None,
) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        write_obo(
            store,
            handle,
            default_namespace=default_namespace,
            ontology_name=ontology_name,
            date=date,
        )
    return path


__all__ = ["FORMAT_VERSION", "export_obo", "format_term", "iter_obo_lines", "write_obo"]
