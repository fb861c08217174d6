"""Diff workflow settings read from the ``[diff]`` table of the spec-tools file."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from core.config_loader import CONFIG_STEM, find_config_file, load_config_file, reject_unknown_keys
from core.platforms import Platform


@dataclass(slots=True)
class DiffConfig:
    executable: str | None = None
    temp_prefix: str = "diff-spec"
    windows_temp_dir: str = "temp"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DiffConfig":
        section = data.get("diff", {})
        if not isinstance(section, Mapping):
            raise TypeError("[diff] must be a table")
        reject_unknown_keys(section, ("executable", "temp_prefix", "windows_temp_dir"), section_name="diff")
        defaults = cls()
        executable = section.get("executable")
        temp_prefix = str(section.get("temp_prefix", defaults.temp_prefix)).strip()
        if not temp_prefix:
            raise ValueError("diff.temp_prefix must not be empty")
        return cls(
            executable=str(executable) if executable else None,
            temp_prefix=temp_prefix,
            windows_temp_dir=str(section.get("windows_temp_dir", defaults.windows_temp_dir)),
        )

    @classmethod
    def load(cls, workspace: Path, path: Path | None = None) -> "DiffConfig":
        config_path = path or find_config_file(workspace, CONFIG_STEM)
        if config_path is None:
            return cls()
        return cls.from_mapping(load_config_file(config_path))

    def resolve_executable(self, workspace: Path, platform: Platform) -> Path:
        """Return the diff executable, defaulting to the one shipped next to the app."""

        if self.executable:
            return Path(self.executable).expanduser()
        return workspace / ("spec.exe" if platform.is_windows else "spec")


__all__ = ["DiffConfig"]
