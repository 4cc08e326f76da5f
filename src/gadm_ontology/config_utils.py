"""Helper utilities for loading build configuration.

Settings come from an optional YAML or JSON file and may be overridden on the
command line.  Paths in the file are expanded for environment variables and
resolved relative to the file's directory so a checked-in configuration works
regardless of the current working directory.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from .terms import GadmOntologyError


class ConfigError(GadmOntologyError):
    """Raised when a configuration file or value is invalid."""


DEFAULT_CONTINENTS_OBOFILE = "VB-top-level-GEO/VB-top-level-GEO.obo"


@dataclass(frozen=True)
class GadmConfig:
    max_level: int = 2
    continents_obofile: str = DEFAULT_CONTINENTS_OBOFILE
    disambiguate: bool = True
    accession_prefix: str = "VBGEO"
    source_prefix: str = "GADM"
    root_name: str = "Earth"
    ontology_name: str = "Database of Global Administrative Areas"

    @classmethod
    def from_mapping(
        cls,
        payload: Mapping[str, Any],
        *,
        base_path: Path | None = None,
    ) -> "GadmConfig":
        known = {item.name for item in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in payload.items():
            normalized = str(key).replace("-", "_")
            if normalized not in known:
                raise ConfigError(f"Unknown configuration option '{key}'")
            if value is None:
                continue
            values[normalized] = value
        if "continents_obofile" in values:
            values["continents_obofile"] = _resolve_path(values["continents_obofile"], base_path)
        return cls().with_overrides(**values)

    def with_overrides(self, **overrides: Any) -> "GadmConfig":
        cleaned = {key: value for key, value in overrides.items() if value is not None}
        if "max_level" in cleaned:
            cleaned["max_level"] = _coerce_int("max_level", cleaned["max_level"])
        if "disambiguate" in cleaned:
            cleaned["disambiguate"] = _coerce_bool("disambiguate", cleaned["disambiguate"])
        for key in ("continents_obofile", "accession_prefix", "source_prefix", "root_name", "ontology_name"):
            if key in cleaned:
                cleaned[key] = str(cleaned[key])
        updated = replace(self, **cleaned)
        updated.validate()
        return updated

    def validate(self) -> None:
        if self.max_level < 0:
            raise ConfigError(f"max_level must be non-negative, got {self.max_level}")
        if not self.continents_obofile:
            raise ConfigError("continents_obofile must be a non-empty path")
        if not self.accession_prefix:
            raise ConfigError("accession_prefix must be a non-empty string")


def _resolve_path(value: Any, base_path: Path | None) -> str:
    expanded = Path(os.path.expandvars(os.path.expanduser(str(value))))
    if not expanded.is_absolute() and base_path is not None:
        expanded = base_path / expanded
    return str(expanded)


def _coerce_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc


def _coerce_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    if isinstance(value, int):
        return bool(value)
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def load_config(path: Path | str | None) -> GadmConfig:
    """Load a :class:`GadmConfig` from a YAML or JSON file.

    ``None`` returns the defaults.
    """

    if path is None:
        return GadmConfig()
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file '{source}': {exc}") from exc
    suffix = source.suffix.lower()
    try:
        if suffix in {".yaml", ".yml"}:
            payload = yaml.safe_load(text)
        else:
            payload = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Invalid configuration file '{source}': {exc}") from exc
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ConfigError(f"Configuration file '{source}' must contain a mapping")
    return GadmConfig.from_mapping(payload, base_path=source.resolve().parent)


__all__ = ["ConfigError", "DEFAULT_CONTINENTS_OBOFILE", "GadmConfig", "load_config"]
