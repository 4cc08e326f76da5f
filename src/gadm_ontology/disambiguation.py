"""Disambiguation of administrative areas that share a display name.

GADM contains many areas with identical names (dozens of "Santa Maria",
"San Miguel" at several levels inside one country, cities named after their
province, ...).  After the whole hierarchy has been built, every duplicated
name is qualified with a distinguishing ancestor so that
``Santa Maria`` becomes ``Santa Maria (Argentina)``, ``Santa Maria (Brazil)``
and so on, keeping the plain name as an EXACT synonym.

The pass runs in two phases:

1. *Mark and rename.*  For each duplicated name, walk the ancestor levels from
   the coarsest (countries) downwards.  Under each ancestor, the shallowest
   same-named descendants are candidates; a lone unresolved candidate is
   renamed to ``"<name> (<ancestor source id>)"``.  When exactly two areas
   share a name and one of them is strictly shallower, that one keeps its
   plain name so a city ends up as ``New York (New York)`` rather than
   ``New York (New York (United States))``.
2. *Resolve placeholders.*  Renamed terms are visited in ascending level
   order and the raw ancestor id is replaced by that ancestor's final name.
   Ancestors always sit at a lower level than their descendants, so their
   own qualifiers are in place before they are substituted.

Collisions that cannot be separated by a single ancestor (several candidates
under the same ancestor at the same level) are left untouched and reported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from .hierarchy import DEFAULT_SOURCE_PREFIX
from .terms import GadmOntologyError, TermStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingRename:
    """A term renamed with a raw ancestor id awaiting substitution."""

    accession: str
    original_name: str
    ancestor_level: int
    ancestor_id: str
    level: int


@dataclass
class DisambiguationReport:
    renamed: List[str] = field(default_factory=list)
    kept: List[str] = field(default_factory=list)
    ambiguous: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.renamed)


class Disambiguator:
    """Qualify duplicated term names with their distinguishing ancestor."""

    def __init__(
        self,
        store: TermStore,
        *,
        max_level: int,
        source_prefix: str = DEFAULT_SOURCE_PREFIX,
    ) -> None:
        self.store = store
        self.max_level = max_level
        self.source_prefix = source_prefix

    def run(self) -> DisambiguationReport:
        report = DisambiguationReport()
        resolved: Dict[str, int] = {}
        pending: List[PendingRename] = []

        duplicates = self.store.duplicate_names()
        logger.info("Disambiguating %d duplicated names", len(duplicates))
        for name in duplicates:
            self._mark_and_rename(name, resolved, pending, report)
        self._resolve_placeholders(pending)

        logger.info(
            "Renamed %d terms; %d names remain ambiguous",
            len(report.renamed),
            len(report.ambiguous),
        )
        return report

    # ------------------------------------------------------------------
    # Phase 1
    # ------------------------------------------------------------------
    def _mark_and_rename(
        self,
        name: str,
        resolved: Dict[str, int],
        pending: List[PendingRename],
        report: DisambiguationReport,
    ) -> None:
        uses = self.store.name_uses(name)
        logger.debug("%d dupes of %s", len(uses), name)

        if len(uses) == 2:
            top_level = min(uses.values())
            top = sorted(accession for accession, level in uses.items() if level == top_level)
            if len(top) == 1:
                logger.debug("Keeping %s for %s at level %d", name, top[0], top_level)
                resolved[top[0]] = top_level
                report.kept.append(top[0])

        for ancestor_level in range(self.max_level):
            by_parent = self.store.name_uses_by_parent(name, ancestor_level)
            for ancestor_id in sorted(by_parent):
                members = by_parent[ancestor_id]
                # only the shallowest descendants of this ancestor compete
                level = min(members.values())
                candidates = sorted(
                    accession
                    for accession, member_level in members.items()
                    if member_level == level and accession not in resolved
                )
                if len(candidates) != 1:
                    continue
                accession = candidates[0]
                term = self.store.get(accession)
                term.name = f"{name} ({ancestor_id})"
                term.add_synonym(name, f"{self.source_prefix}:{term.source_id}")
                resolved[accession] = level
                pending.append(PendingRename(accession, name, ancestor_level, ancestor_id, level))
                report.renamed.append(accession)
                logger.debug(
                    "%d processed level %d term %s to %s", ancestor_level, level, name, term.name
                )

        unresolved = sorted(accession for accession in uses if accession not in resolved)
        if len(unresolved) > 1:
            report.ambiguous[name] = unresolved
            logger.debug("Could not disambiguate %d terms named %s", len(unresolved), name)

    # ------------------------------------------------------------------
    # Phase 2
    # ------------------------------------------------------------------
    def _resolve_placeholders(self, pending: List[PendingRename]) -> None:
        for rename in sorted(pending, key=lambda item: (item.level, item.accession)):
            ancestor = self.store.find_source_term(rename.ancestor_level, rename.ancestor_id)
            if ancestor is None:
                raise GadmOntologyError(
                    f"Ancestor {rename.ancestor_id} of {rename.accession} is missing from the term store"
                )
            term = self.store.get(rename.accession)
            placeholder = f"({rename.ancestor_id})"
            prefix = term.name[: len(term.name) - len(placeholder)]
            term.name = f"{prefix}({ancestor.name})"


__all__ = ["DisambiguationReport", "Disambiguator", "PendingRename"]
