"""Build an is_a ontology of GADM administrative areas."""

from .accession import AccessionAssigner
from .config_utils import ConfigError, GadmConfig, load_config
from .continents import (
    ContinentMerger,
    ContinentNode,
    ContinentOntology,
    ContinentsSourceError,
    ensure_continents_source,
)
from .disambiguation import DisambiguationReport, Disambiguator
from .hierarchy import HierarchyBuilder, MissingParentError
from .obo import export_obo, write_obo
from .pipeline import BuildResult, build_ontology
from .records import AdministrativeRecord, read_gadm_level
from .terms import (
    Definition,
    DuplicateTermError,
    GadmOntologyError,
    Synonym,
    Term,
    TermStore,
)

__all__ = [
    "AccessionAssigner",
    "AdministrativeRecord",
    "BuildResult",
    "ConfigError",
    "ContinentMerger",
    "ContinentNode",
    "ContinentOntology",
    "ContinentsSourceError",
    "Definition",
    "DisambiguationReport",
    "Disambiguator",
    "DuplicateTermError",
    "GadmConfig",
    "GadmOntologyError",
    "HierarchyBuilder",
    "MissingParentError",
    "Synonym",
    "Term",
    "TermStore",
    "build_ontology",
    "ensure_continents_source",
    "export_obo",
    "load_config",
    "read_gadm_level",
    "write_obo",
]
