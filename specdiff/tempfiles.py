"""Location, creation and cleanup of per-request diff snapshot files."""
from __future__ import annotations

from pathlib import Path
import tempfile

from core.console import ConsoleLike
from core.filetree import delete_path_recursive, ensure_directory
from core.platforms import Platform

from .config import DiffConfig


def temp_directory(platform: Platform, workspace: Path, config: DiffConfig) -> Path:
    """Directory holding snapshot files; creation and cleanup both go through here."""

    if platform.is_windows:
        return workspace / config.windows_temp_dir
    return Path(tempfile.gettempdir())


def snapshot_path(platform: Platform, workspace: Path, config: DiffConfig, request_id: str) -> Path:
    directory = temp_directory(platform, workspace, config)
    if platform.is_windows:
        ensure_directory(directory)
    return directory / f"{config.temp_prefix}-{request_id}.json"


def cleanup_temp_files(
    platform: Platform,
    workspace: Path,
    config: DiffConfig,
    console: ConsoleLike,
) -> int:
    """Remove leftover snapshot files. Returns the number of paths removed.

    On Windows the whole local temp directory belongs to the tool and is
    removed; elsewhere only files carrying the snapshot prefix are touched.
    """

    directory = temp_directory(platform, workspace, config)
    if platform.is_windows:
        console.debug(f"Removing diff temp directory {directory}")
        return 1 if delete_path_recursive(directory) else 0

    removed = 0
    for path in sorted(directory.glob(f"{config.temp_prefix}-*.json")):
        console.debug(f"Removing diff snapshot {path}")
        if delete_path_recursive(path):
            removed += 1
    return removed


__all__ = ["cleanup_temp_files", "snapshot_path", "temp_directory"]
