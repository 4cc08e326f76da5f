"""Create an is_a ontology of GADM place names with continent groupings.

Expects ``<stem>_0.shp`` .. ``<stem>_<max-level>.shp`` (e.g. the GADM 3.6
shapefiles ``gadm36_0`` .. ``gadm36_2``) and an OBO file grouping countries
into regions and continents, and writes the merged ontology in OBO format.

Example::

    python scripts/gadm_to_obo.py --max-level 2 gadm36 > gadm36.obo
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Sequence

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from gadm_ontology import (
    ContinentOntology,
    GadmConfig,
    GadmOntologyError,
    build_ontology,
    ensure_continents_source,
    export_obo,
    load_config,
    read_gadm_level,
    write_obo,
)
from gadm_ontology.records import DEFAULT_SUFFIX

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n", 1)[0])
    parser.add_argument("stem", help="Dataset stem, e.g. 'gadm36' for gadm36_0.shp, gadm36_1.shp, ...")
    parser.add_argument("--config", type=Path, help="Optional YAML/JSON configuration file")
    parser.add_argument("--max-level", type=int, help="Highest administrative level to ingest (default 2)")
    parser.add_argument(
        "--continents-obofile",
        help="OBO file grouping countries into regions and continents",
    )
    parser.add_argument(
        "--disambiguate",
        dest="disambiguate",
        action="store_true",
        default=None,
        help="Qualify duplicated names with a distinguishing parent (default)",
    )
    parser.add_argument(
        "--no-disambiguate",
        dest="disambiguate",
        action="store_false",
        help="Leave duplicated names such as 'Santa Maria' untouched",
    )
    parser.add_argument("--accession-prefix", help="Prefix for generated accessions (default VBGEO)")
    parser.add_argument("--suffix", default=DEFAULT_SUFFIX, help="File suffix of each level layer")
    parser.add_argument("--output", type=Path, help="Write the ontology here instead of stdout")
    parser.add_argument("--no-date", action="store_true", help="Omit the date header line")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    return parser


def resolve_config(args: argparse.Namespace) -> GadmConfig:
    config = load_config(args.config)
    return config.with_overrides(
        max_level=args.max_level,
        continents_obofile=args.continents_obofile,
        disambiguate=args.disambiguate,
        accession_prefix=args.accession_prefix,
    )


def run(args: argparse.Namespace) -> None:
    config = resolve_config(args)
    ensure_continents_source(config.continents_obofile)
    continents = ContinentOntology.from_obo(config.continents_obofile, root_name=config.root_name)

    result = build_ontology(
        lambda level: read_gadm_level(args.stem, level, suffix=args.suffix),
        continents,
        config,
    )

    date = None if args.no_date else datetime.now()
    if args.output:
        export_obo(
            result.store,
            args.output,
            default_namespace=config.accession_prefix,
            ontology_name=config.ontology_name,
            date=date,
        )
        logger.info("Ontology written to %s", args.output)
    else:
        write_obo(
            result.store,
            sys.stdout,
            default_namespace=config.accession_prefix,
            ontology_name=config.ontology_name,
            date=date,
        )


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        stream=sys.stderr,
    )

    try:
        run(args)
    except GadmOntologyError as exc:
        logger.error("%s", exc)
        return 1
    except Exception as exc:
        logger.error("Failed to build ontology: %s", exc)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
