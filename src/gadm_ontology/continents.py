"""Continent hierarchy loading and merging.

Countries from GADM carry no information about the regions and continents
they belong to.  That grouping lives in a separately maintained OBO file
(regions -> continents -> ``Earth``) whose English country names match the
GADM country names.  :class:`ContinentOntology` parses that file once and
indexes it by name; :class:`ContinentMerger` copies the ancestor chain of each
country into the :class:`~gadm_ontology.terms.TermStore`, sharing every copied
ancestor by name so a continent reached from many countries exists only once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .terms import GadmOntologyError, Term, TermStore

logger = logging.getLogger(__name__)

DEFAULT_ROOT_NAME = "Earth"


class ContinentsSourceError(GadmOntologyError):
    """Raised when the continent ontology cannot be used."""


@dataclass
class ContinentNode:
    identifier: str
    name: str
    parent_ids: List[str] = field(default_factory=list)


def ensure_continents_source(path: str | Path | None) -> Path:
    """Fail early unless ``path`` names an existing, non-empty file."""

    if not path:
        raise ContinentsSourceError("No continents OBO file configured")
    source = Path(path)
    if not source.is_file() or source.stat().st_size == 0:
        raise ContinentsSourceError(f"can't find continents obo file '{source}'")
    return source


def _strip_comment(value: str) -> str:
    if " !" in value:
        value = value.split(" !", 1)[0]
    return value.strip()


def _iter_stanzas(lines: Iterable[str]) -> Iterable[Tuple[str, List[Tuple[str, str]]]]:
    header: Optional[str] = None
    tags: List[Tuple[str, str]] = []
    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith("!"):
            continue
        if line.startswith("[") and line.endswith("]"):
            if header is not None:
                yield header, tags
            header = line[1:-1].strip()
            tags = []
            continue
        if header is None or ":" not in line:
            continue
        tag, value = line.split(":", 1)
        tags.append((tag.strip(), value.strip()))
    if header is not None:
        yield header, tags


class ContinentOntology:
    """Read-only view over the continent grouping hierarchy."""

    def __init__(self, nodes: Iterable[ContinentNode], *, root_name: str = DEFAULT_ROOT_NAME) -> None:
        self._nodes: Dict[str, ContinentNode] = {}
        self._by_name: Dict[str, ContinentNode] = {}
        for node in nodes:
            self._nodes[node.identifier] = node
            # first definition of a name wins, matching a linear name search
            self._by_name.setdefault(node.name, node)
        root = self._by_name.get(root_name)
        if root is None:
            raise ContinentsSourceError(
                f"Continent ontology has no root term named '{root_name}'"
            )
        self._root = root

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_obo_text(cls, text: str, *, root_name: str = DEFAULT_ROOT_NAME) -> "ContinentOntology":
        nodes: List[ContinentNode] = []
        for header, tags in _iter_stanzas(text.splitlines()):
            if header != "Term":
                continue
            values: Dict[str, str] = {}
            parent_ids: List[str] = []
            obsolete = False
            for tag, value in tags:
                if tag == "is_a":
                    parent_id = _strip_comment(value)
                    if parent_id and parent_id not in parent_ids:
                        parent_ids.append(parent_id)
                elif tag == "is_obsolete":
                    obsolete = value.lower() == "true"
                elif tag in {"id", "name"}:
                    values.setdefault(tag, value)
            if obsolete or "id" not in values or "name" not in values:
                continue
            nodes.append(ContinentNode(values["id"], values["name"], parent_ids))
        logger.debug("Parsed %d continent ontology terms", len(nodes))
        return cls(nodes, root_name=root_name)

    @classmethod
    def from_obo(cls, path: str | Path, *, root_name: str = DEFAULT_ROOT_NAME) -> "ContinentOntology":
        source = ensure_continents_source(path)
        try:
            text = source.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ContinentsSourceError(f"Unable to read continents obo file '{source}': {exc}") from exc
        ontology = cls.from_obo_text(text, root_name=root_name)
        logger.info("Loaded %d continent terms from %s", len(ontology), source)
        return ontology

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    @property
    def root(self) -> ContinentNode:
        return self._root

    def get_node_by_name(self, name: str) -> Optional[ContinentNode]:
        return self._by_name.get(name)

    def get_parents(self, node: ContinentNode) -> Sequence[ContinentNode]:
        parents: List[ContinentNode] = []
        for parent_id in node.parent_ids:
            parent = self._nodes.get(parent_id)
            if parent is None:
                logger.warning(
                    "Continent term %s refers to unknown parent %s; ignoring",
                    node.identifier,
                    parent_id,
                )
                continue
            parents.append(parent)
        return tuple(parents)

    def __len__(self) -> int:
        return len(self._nodes)


class ContinentMerger:
    """Attach country terms to copies of their continent ancestry."""

    def __init__(self, store: TermStore, continents: ContinentOntology) -> None:
        self.store = store
        self.continents = continents
        self._expanded: Set[str] = set()
        self._copied: List[Term] = []

    def attach(self, term: Term, name: str) -> None:
        first_new = len(self._copied)
        node = self.continents.get_node_by_name(name)
        if node is not None:
            self._link_parents(node, term, (node.identifier,))
        if not term.parents:
            if node is None:
                logger.debug("No continent grouping for %s; linking to %s", name, self.continents.root.name)
            else:
                logger.warning(
                    "Continent term for %s has no usable parents; linking to %s",
                    name,
                    self.continents.root.name,
                )
            self.store.add_is_a(term, self.copy_node(self.continents.root))
        self._link_orphans(self._copied[first_new:])

    def copy_node(self, node: ContinentNode) -> Term:
        term, created = self.store.get_or_create_grouping_term(node.name)
        if created:
            logger.debug("Copied continent term '%s' as %s", node.name, term.accession)
            self._copied.append(term)
        return term

    def _link_orphans(self, copied: Sequence[Term]) -> None:
        # a walk cut short by a cycle can leave a copied ancestor without parents
        root_name = self.continents.root.name
        for term in copied:
            if term.parents or term.name == root_name:
                continue
            logger.warning("Continent term '%s' has no parents after merging; linking to %s", term.name, root_name)
            self.store.add_is_a(term, self.copy_node(self.continents.root))

    def _link_parents(self, node: ContinentNode, term: Term, path: Tuple[str, ...]) -> None:
        for parent in self.continents.get_parents(node):
            if parent.identifier in path:
                logger.warning(
                    "Cycle in continent ontology at %s -> %s; not following",
                    node.identifier,
                    parent.identifier,
                )
                continue
            copied = self.copy_node(parent)
            self.store.add_is_a(term, copied)
            if parent.identifier in self._expanded:
                continue
            self._link_parents(parent, copied, path + (parent.identifier,))
            self._expanded.add(parent.identifier)


__all__ = [
    "ContinentMerger",
    "ContinentNode",
    "ContinentOntology",
    "ContinentsSourceError",
    "DEFAULT_ROOT_NAME",
    "ensure_continents_source",
]
