"""GADM attribute-table reading.

GADM distributes one layer per administrative level (``gadm36_0``,
``gadm36_1``, ...).  Each row carries the GIDs of the area and all of its
ancestors (``GID_0`` .. ``GID_<level>``) plus ``NAME_<level>``,
``VARNAME_<level>`` (pipe-delimited alternative names) and ``ENGTYPE_<level>``
(English subtype label such as "Province").  Only the attribute table is read;
geometries are ignored.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, List, Mapping, Optional

import geopandas as gpd

from .terms import GadmOntologyError

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".shp"


class RecordError(GadmOntologyError):
    """Raised when an attribute row cannot be turned into a record."""


@dataclass(frozen=True)
class AdministrativeRecord:
    """One administrative area as described by its GADM attribute row."""

    level: int
    source_id: str
    name: Any = None
    parent_id: Optional[str] = None
    synonyms: Any = None
    subtype: Any = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any], level: int) -> "AdministrativeRecord":
        source_id = _field(row, f"GID_{level}")
        if source_id is None:
            raise RecordError(f"GADM row at level {level} lacks a GID_{level} value")
        parent_id = _field(row, f"GID_{level - 1}") if level > 0 else None
        return cls(
            level=level,
            source_id=str(source_id),
            name=_field(row, f"NAME_{level}"),
            parent_id=str(parent_id) if parent_id is not None else None,
            synonyms=_field(row, f"VARNAME_{level}"),
            subtype=_field(row, f"ENGTYPE_{level}"),
        )


def _field(row: Mapping[str, Any], key: str) -> Any:
    value = row.get(key)
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def level_path(stem: str | Path, level: int, suffix: str = DEFAULT_SUFFIX) -> Path:
    return Path(f"{stem}_{level}{suffix}")


def read_attribute_rows(path: Path) -> List[Mapping[str, Any]]:
    frame = gpd.read_file(path, ignore_geometry=True)
    return frame.to_dict("records")


def read_gadm_level(
    stem: str | Path,
    level: int,
    *,
    suffix: str = DEFAULT_SUFFIX,
    reader: Callable[[Path], List[Mapping[str, Any]]] | None = None,
) -> Iterator[AdministrativeRecord]:
    """Yield the records of one GADM level in file order."""

    path = level_path(stem, level, suffix)
    rows = (reader or read_attribute_rows)(path)
    logger.info("Read %d level %d areas from %s", len(rows), level, path)
    for row in rows:
        yield AdministrativeRecord.from_row(row, level)


__all__ = [
    "AdministrativeRecord",
    "DEFAULT_SUFFIX",
    "RecordError",
    "level_path",
    "read_attribute_rows",
    "read_gadm_level",
]
