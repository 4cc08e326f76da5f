"""Level-by-level construction of the administrative term hierarchy."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .cleaning import clean_text, split_synonyms
from .continents import ContinentMerger
from .records import AdministrativeRecord
from .terms import Definition, GadmOntologyError, Term, TermStore

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_PREFIX = "GADM"


class MissingParentError(GadmOntologyError):
    """Raised when a record refers to a parent that was never created."""


class HierarchyBuilder:
    """Create one term per administrative record and wire its is_a edges.

    Levels must be fed in ascending order so that every parent lookup hits a
    term created earlier in the run.
    """

    def __init__(
        self,
        store: TermStore,
        merger: ContinentMerger,
        *,
        source_prefix: str = DEFAULT_SOURCE_PREFIX,
    ) -> None:
        self.store = store
        self.merger = merger
        self.source_prefix = source_prefix
        self._current_level: Optional[int] = None

    def add_level(self, level: int, records: Iterable[AdministrativeRecord]) -> List[Term]:
        if level < 0:
            raise ValueError(f"Administrative level must be non-negative, got {level}")
        if self._current_level is not None and level < self._current_level:
            raise ValueError(
                f"Level {level} supplied after level {self._current_level}; "
                "levels must be ingested in ascending order"
            )
        self._current_level = level
        created: List[Term] = []
        for record in records:
            if record.level != level:
                raise ValueError(
                    f"Record {record.source_id} has level {record.level} "
                    f"but was supplied with level {level}"
                )
            created.append(self.add_record(record))
        logger.info("Created %d terms for level %d", len(created), level)
        return created

    def add_record(self, record: AdministrativeRecord) -> Term:
        provenance = f"{self.source_prefix}:{record.source_id}"
        name = clean_text(record.name) or f"Unnamed ({record.source_id})"

        parent: Optional[Term] = None
        if record.level > 0:
            parent = self.store.find_source_term(record.level - 1, str(record.parent_id))
            if record.parent_id is None or parent is None:
                raise MissingParentError(
                    f"Fatal error: parent term {record.parent_id} of {record.source_id} does not exist"
                )

        term = self.store.create_term(
            name,
            source_id=record.source_id,
            level=record.level,
            alt_id=provenance,
        )
        for synonym in split_synonyms(record.synonyms):
            term.add_synonym(synonym, provenance)

        if parent is not None:
            self.store.add_is_a(term, parent)
            subtype = clean_text(record.subtype)
            term.definition = Definition(f"{subtype} in {parent.name}".strip(), provenance)
            self.store.set_lineage(term, self.store.lineage(parent) + (parent.source_id,))
        else:
            term.definition = Definition("Country", provenance)
            self.merger.attach(term, name)

        self.store.record_name_use(term)
        return term


__all__ = ["DEFAULT_SOURCE_PREFIX", "HierarchyBuilder", "MissingParentError"]
