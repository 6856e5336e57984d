"""Expose the project version for health checks and metadata endpoints."""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "naijatax"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[3] / "pyproject.toml"

_PROJECT_TABLE = re.compile(r"^\[project\]\s*$(?P<body>.*?)(?=^\[|\Z)", re.M | re.S)
_VERSION_LINE = re.compile(r'^version\s*=\s*"(?P<version>[^"]+)"', re.M)


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the installed version, or the checkout's ``pyproject.toml`` version."""

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return read_pyproject_version(PYPROJECT_PATH)


def read_pyproject_version(path: Path) -> str:
    """Return ``project.version`` from the ``pyproject.toml`` at ``path``."""

    if not path.exists():  # pragma: no cover - repository invariant
        raise RuntimeError(f"Unable to locate project metadata at {path}")

    table = _PROJECT_TABLE.search(path.read_text(encoding="utf-8"))
    match = _VERSION_LINE.search(table.group("body")) if table else None
    if match is None:
        raise RuntimeError("Unable to determine project version from pyproject.toml")
    return match.group("version")


__all__ = ["get_project_version", "read_pyproject_version"]
