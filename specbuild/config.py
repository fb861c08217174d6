"""Release configuration: tool names, file layout and packaging flags."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

from core.config_loader import (
    CONFIG_STEM,
    find_config_file,
    load_config_file,
    reject_unknown_keys,
    string_list,
)
from core.platforms import Platform


@dataclass(slots=True)
class CompilerSettings:
    executable: str = "elm-make"
    entry: str = "Spec.elm"
    output: str = "elm.js"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "CompilerSettings":
        reject_unknown_keys(data, ("executable", "entry", "output"), section_name="compiler")
        defaults = cls()
        return cls(
            executable=str(data.get("executable", defaults.executable)),
            entry=str(data.get("entry", defaults.entry)),
            output=str(data.get("output", defaults.output)),
        )


@dataclass(slots=True)
class PackagerSettings:
    executable: str = "electron-packager"
    product_name: str = "spec-edit"
    arch: str = "x64"
    version: str = "1.3.3"
    out: str = "dist/out"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PackagerSettings":
        reject_unknown_keys(
            data,
            ("executable", "product_name", "arch", "version", "out"),
            section_name="packager",
        )
        defaults = cls()
        return cls(
            executable=str(data.get("executable", defaults.executable)),
            product_name=str(data.get("product_name", defaults.product_name)),
            arch=str(data.get("arch", defaults.arch)),
            version=str(data.get("version", defaults.version)),
            out=str(data.get("out", defaults.out)),
        )


def _default_executables() -> Dict[Platform, str]:
    return {Platform.MAC_OS: "spec", Platform.WINDOWS: "spec.exe"}


@dataclass(slots=True)
class LayoutSettings:
    dist_dir: str = "dist"
    artifacts_dir: str = "elm-stuff/build-artifacts"
    assets: List[str] = field(
        default_factory=lambda: ["elmelectron.js", "index.html", "main.js", "package.json"]
    )
    stylesheet: str = "spec.css"
    executables: Dict[Platform, str] = field(default_factory=_default_executables)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LayoutSettings":
        reject_unknown_keys(
            data,
            ("dist_dir", "artifacts_dir", "assets", "stylesheet", "executables"),
            section_name="layout",
        )
        defaults = cls()
        executables = dict(defaults.executables)
        raw_executables = data.get("executables", {})
        if not isinstance(raw_executables, Mapping):
            raise TypeError("layout.executables must be a mapping of platform to filename")
        for key, value in raw_executables.items():
            try:
                platform = Platform(str(key))
            except ValueError:
                choices = ", ".join(member.value for member in Platform)
                raise ValueError(f"Unknown platform '{key}' in layout.executables. Choose from: {choices}") from None
            executables[platform] = str(value)

        assets = defaults.assets
        if "assets" in data:
            assets = string_list(data["assets"], field_name="layout.assets")
        return cls(
            dist_dir=str(data.get("dist_dir", defaults.dist_dir)),
            artifacts_dir=str(data.get("artifacts_dir", defaults.artifacts_dir)),
            assets=assets,
            stylesheet=str(data.get("stylesheet", defaults.stylesheet)),
            executables=executables,
        )


@dataclass(slots=True)
class ReleaseConfig:
    compiler: CompilerSettings = field(default_factory=CompilerSettings)
    packager: PackagerSettings = field(default_factory=PackagerSettings)
    layout: LayoutSettings = field(default_factory=LayoutSettings)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ReleaseConfig":
        sections: Dict[str, Mapping[str, Any]] = {}
        for name in ("compiler", "packager", "layout"):
            section = data.get(name, {})
            if not isinstance(section, Mapping):
                raise TypeError(f"[{name}] must be a table")
            sections[name] = section
        return cls(
            compiler=CompilerSettings.from_mapping(sections["compiler"]),
            packager=PackagerSettings.from_mapping(sections["packager"]),
            layout=LayoutSettings.from_mapping(sections["layout"]),
        )

    @classmethod
    def load(cls, workspace: Path, path: Path | None = None) -> "ReleaseConfig":
        """Read ``path`` (or the workspace's ``spec-tools`` file) over the defaults."""

        config_path = path or find_config_file(workspace, CONFIG_STEM)
        if config_path is None:
            return cls()
        return cls.from_mapping(load_config_file(config_path))

    def executable_for(self, platform: Platform) -> str:
        return self.layout.executables[platform]


__all__ = [
    "CompilerSettings",
    "LayoutSettings",
    "PackagerSettings",
    "ReleaseConfig",
]
