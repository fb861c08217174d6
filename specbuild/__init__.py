"""Release orchestrator for the spec editor: development builds, cleanup and packaging."""
from __future__ import annotations

from .cli import main

__all__ = ["main"]
