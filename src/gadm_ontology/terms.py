"""In-memory term graph shared by the ontology build stages.

The :class:`TermStore` owns every :class:`Term` created during a run together
with the lookup tables the later stages rely on:

* administrative terms indexed by ``(level, source_id)`` so child records can
  locate their parent;
* continent grouping terms indexed by name so shared ancestors are copied into
  the graph only once;
* the name-collision groups consulted by the disambiguation pass.

Terms are never removed.  Their names may be rewritten once by the
disambiguation stage and synonyms are only ever appended.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .accession import AccessionAssigner


class GadmOntologyError(RuntimeError):
    """Base class for fatal errors raised while building the ontology."""


class DuplicateTermError(GadmOntologyError):
    """Raised when a source id is registered twice at the same level."""


EXACT = "EXACT"


@dataclass(frozen=True)
class Synonym:
    text: str
    scope: str = EXACT
    provenance: Optional[str] = None


@dataclass(frozen=True)
class Definition:
    text: str
    provenance: Optional[str] = None


@dataclass
class Term:
    """A single node of the generated taxonomy."""

    accession: str
    name: str
    source_id: Optional[str] = None
    level: Optional[int] = None
    alt_id: Optional[str] = None
    definition: Optional[Definition] = None
    synonyms: List[Synonym] = field(default_factory=list)
    parents: List[str] = field(default_factory=list)

    def add_synonym(self, text: str, provenance: Optional[str] = None, scope: str = EXACT) -> None:
        self.synonyms.append(Synonym(text=text, scope=scope, provenance=provenance))

    def add_parent(self, accession: str) -> bool:
        if accession == self.accession or accession in self.parents:
            return False
        self.parents.append(accession)
        return True


class TermStore:
    """Aggregate owning all terms of one ontology build."""

    def __init__(self, assigner: AccessionAssigner | None = None) -> None:
        self.assigner = assigner or AccessionAssigner()
        self._terms: Dict[str, Term] = {}
        self._by_source: Dict[Tuple[int, str], Term] = {}
        self._grouping_by_name: Dict[str, Term] = {}
        self._lineages: Dict[str, Tuple[str, ...]] = {}
        self._by_name: Dict[str, Dict[str, int]] = {}
        self._by_name_level_parent: Dict[str, Dict[int, Dict[str, Dict[str, int]]]] = {}

    # ------------------------------------------------------------------
    # Term creation and lookup
    # ------------------------------------------------------------------
    def create_term(
        self,
        name: str,
        *,
        source_id: Optional[str] = None,
        level: Optional[int] = None,
        alt_id: Optional[str] = None,
    ) -> Term:
        if source_id is not None and level is not None:
            if (level, source_id) in self._by_source:
                raise DuplicateTermError(
                    f"Term with source id '{source_id}' already exists at level {level}"
                )
        term = Term(
            accession=self.assigner.assign(),
            name=name,
            source_id=source_id,
            level=level,
            alt_id=alt_id,
        )
        self._terms[term.accession] = term
        if source_id is not None and level is not None:
            self._by_source[(level, source_id)] = term
        return term

    def get(self, accession: str) -> Term:
        return self._terms[accession]

    def find_source_term(self, level: int, source_id: str) -> Optional[Term]:
        return self._by_source.get((level, source_id))

    def find_grouping_term(self, name: str) -> Optional[Term]:
        return self._grouping_by_name.get(name)

    def get_or_create_grouping_term(self, name: str) -> Tuple[Term, bool]:
        """Return the continent grouping term called ``name``, creating it once."""

        existing = self._grouping_by_name.get(name)
        if existing is not None:
            return existing, False
        term = self.create_term(name)
        self._grouping_by_name[name] = term
        return term, True

    def add_is_a(self, child: Term, parent: Term) -> bool:
        return child.add_parent(parent.accession)

    def terms(self) -> Sequence[Term]:
        return tuple(self._terms.values())

    def relationships(self) -> Iterator[Tuple[Term, Term]]:
        for term in self._terms.values():
            for parent_accession in term.parents:
                yield term, self._terms[parent_accession]

    def roots(self) -> Sequence[Term]:
        return tuple(term for term in self._terms.values() if not term.parents)

    def __len__(self) -> int:
        return len(self._terms)

    def __iter__(self) -> Iterator[Term]:
        return iter(self._terms.values())

    # ------------------------------------------------------------------
    # Ancestry and name-collision bookkeeping
    # ------------------------------------------------------------------
    def set_lineage(self, term: Term, ancestor_ids: Sequence[str]) -> None:
        self._lineages[term.accession] = tuple(ancestor_ids)

    def lineage(self, term: Term) -> Tuple[str, ...]:
        """Source ids of ``term``'s administrative ancestors, level 0 first."""

        return self._lineages.get(term.accession, ())

    def record_name_use(self, term: Term) -> None:
        if term.level is None:
            raise ValueError(f"Term {term.accession} has no administrative level")
        self._by_name.setdefault(term.name, {})[term.accession] = term.level
        per_level = self._by_name_level_parent.setdefault(term.name, {})
        for ancestor_level, ancestor_id in enumerate(self.lineage(term)):
            per_parent = per_level.setdefault(ancestor_level, {})
            per_parent.setdefault(ancestor_id, {})[term.accession] = term.level

    def duplicate_names(self) -> List[str]:
        return sorted(name for name, uses in self._by_name.items() if len(uses) > 1)

    def name_uses(self, name: str) -> Mapping[str, int]:
        return self._by_name.get(name, {})

    def name_uses_by_parent(self, name: str, level: int) -> Mapping[str, Mapping[str, int]]:
        return self._by_name_level_parent.get(name, {}).get(level, {})


__all__ = [
    "EXACT",
    "Definition",
    "DuplicateTermError",
    "GadmOntologyError",
    "Synonym",
    "Term",
    "TermStore",
]
