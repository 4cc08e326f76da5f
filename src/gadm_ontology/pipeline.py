"""End-to-end ontology build: ingest levels, merge continents, disambiguate."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from .accession import AccessionAssigner
from .config_utils import GadmConfig
from .continents import ContinentMerger, ContinentOntology
from .disambiguation import DisambiguationReport, Disambiguator
from .hierarchy import HierarchyBuilder
from .records import AdministrativeRecord
from .terms import TermStore

logger = logging.getLogger(__name__)

RecordSource = Callable[[int], Iterable[AdministrativeRecord]]


@dataclass
class BuildResult:
    store: TermStore
    disambiguation: Optional[DisambiguationReport] = None


def build_ontology(
    records_for_level: RecordSource,
    continents: ContinentOntology,
    config: GadmConfig,
) -> BuildResult:
    """Build the full term graph for levels ``0..config.max_level``.

    ``records_for_level`` is called once per level, in ascending order, so a
    lazily reading source never has more than one level open at a time.
    """

    store = TermStore(AccessionAssigner(config.accession_prefix))
    merger = ContinentMerger(store, continents)
    builder = HierarchyBuilder(store, merger, source_prefix=config.source_prefix)

    for level in range(config.max_level + 1):
        builder.add_level(level, records_for_level(level))

    report = None
    if config.disambiguate:
        report = Disambiguator(
            store,
            max_level=config.max_level,
            source_prefix=config.source_prefix,
        ).run()
    else:
        logger.info("Disambiguation disabled; duplicate names left as-is")

    logger.info(
        "Built ontology with %d terms (%d accessions issued)",
        len(store),
        store.assigner.issued,
    )
    return BuildResult(store=store, disambiguation=report)


__all__ = ["BuildResult", "RecordSource", "build_ontology"]
