"""Locate and decode the optional ``spec-tools`` configuration file."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Sequence

import json
import tomllib

import yaml


ConfigParser = Callable[[str], Any]

CONFIG_STEM = "spec-tools"
"""Stem of the optional configuration file shared by the tools."""

PARSERS: Dict[str, ConfigParser] = {
    ".toml": tomllib.loads,
    ".json": json.loads,
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
}
"""Text parsers keyed by file suffix, in lookup order."""


def load_config_file(path: Path) -> Mapping[str, Any]:
    """Parse ``path`` into a mapping; an empty document yields ``{}``.

    Syntax errors surface as ``ValueError`` whatever the format, and a
    document whose root is not a table raises ``TypeError``.
    """

    parser = PARSERS.get(path.suffix.lower())
    if parser is None:
        raise ValueError(f"Unsupported configuration file '{path.name}'. Use one of: {', '.join(PARSERS)}")

    text = path.read_text(encoding="utf-8")
    try:
        data = parser(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Could not parse '{path}': {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"Configuration file '{path}' must contain a mapping at the root")
    return data


def find_config_file(directory: Path, stem: str) -> Path | None:
    """Return the single ``<stem>.<ext>`` configuration file in ``directory``, if any."""

    found = [directory / f"{stem}{suffix}" for suffix in PARSERS]
    found = [path for path in found if path.is_file()]
    if len(found) > 1:
        names = ", ".join(path.name for path in found)
        raise ValueError(f"Found several '{stem}' configuration files ({names}); keep only one")
    return found[0] if found else None


def string_list(value: Any, *, field_name: str) -> List[str]:
    """Validate that ``value`` is a list of non-empty strings."""

    if not isinstance(value, list) or not all(isinstance(item, str) and item for item in value):
        raise TypeError(f"{field_name} must be a list of non-empty strings")
    return list(value)


def reject_unknown_keys(section: Mapping[str, Any], allowed: Sequence[str], *, section_name: str) -> None:
    """Raise ``ValueError`` when ``section`` carries keys outside ``allowed``."""

    unknown = sorted(str(key) for key in section if key not in allowed)
    if unknown:
        raise ValueError(f"Unknown key(s) in [{section_name}]: {', '.join(unknown)}")


__all__ = [
    "CONFIG_STEM",
    "PARSERS",
    "find_config_file",
    "load_config_file",
    "reject_unknown_keys",
    "string_list",
]
