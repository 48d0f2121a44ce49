"""Basic file IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List

import yaml


def read_yaml_file(path: Path) -> Any:
    """Return the parsed YAML document at ``path``.

    Only plain data is constructed; rule files never get to run code.
    """

    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def read_lines(path: Path) -> List[str]:
    """Return the non-blank, non-comment lines of a UTF-8 text file."""

    lines = []
    with path.open("r", encoding="utf-8") as handle:
        for line in handle:
            stripped = line.strip()
            if stripped and not stripped.startswith("#"):
                lines.append(stripped)
    return lines
