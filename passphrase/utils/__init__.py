"""Utility helpers for the passphrase package."""

from .fileio import read_lines, read_yaml_file

__all__ = [
    "read_lines",
    "read_yaml_file",
]
