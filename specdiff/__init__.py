"""Diff workflow for spec documents backed by the external ``spec diff`` tool."""
from __future__ import annotations

from .cli import main

__all__ = ["main"]
