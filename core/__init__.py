"""Shared runtime helpers for the specbuild and specdiff tools."""
