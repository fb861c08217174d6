"""Filesystem primitives used by the build pipeline and temp-file cleanup."""
from __future__ import annotations

from pathlib import Path
import os
import stat

from .console import ConsoleLike


def delete_path_recursive(path: Path | str) -> bool:
    """Delete ``path`` and everything below it.

    Directories are emptied depth-first before being removed; files and
    symbolic links are unlinked directly (links are never followed). A
    missing path is a no-op. Returns ``True`` when something was removed.
    """

    target = Path(path)
    try:
        mode = target.lstat().st_mode
    except FileNotFoundError:
        return False

    if stat.S_ISDIR(mode):
        for entry in target.iterdir():
            delete_path_recursive(entry)
        target.rmdir()
    else:
        target.unlink()
    return True


def copy_file(source: Path | str, dest: Path | str, *, console: ConsoleLike | None = None) -> bool:
    """Copy the full contents of ``source`` over ``dest``.

    Returns ``False`` (after reporting through ``console``) when reading or
    writing fails. The write is not atomic.
    """

    try:
        contents = Path(source).read_bytes()
        Path(dest).write_bytes(contents)
    except OSError as exc:
        if console is not None:
            console.error(f"Failed to copy {source} to {dest}: {exc}")
        return False
    return True


def ensure_directory(path: Path | str) -> bool:
    """Create ``path`` (single level) unless it already exists. Returns ``True`` if created."""

    target = Path(path)
    if target.is_dir():
        return False
    os.mkdir(target)
    return True


__all__ = ["copy_file", "delete_path_recursive", "ensure_directory"]
