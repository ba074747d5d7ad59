"""Version lookup for installed and source-tree runs."""

from __future__ import annotations

import tomllib
from importlib import metadata
from pathlib import Path

DISTRIBUTION = "entry-manifest"
UNKNOWN_VERSION = "0.0.0"


def package_version() -> str:
    """Version of the installed distribution, or of the source checkout it runs from."""
    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return pyproject_version(Path(__file__).resolve().parents[1])


def pyproject_version(root: Path) -> str:
    pyproject = root / "pyproject.toml"
    if not pyproject.is_file():
        return UNKNOWN_VERSION
    with pyproject.open("rb") as handle:
        project = tomllib.load(handle).get("project", {})
    return str(project.get("version", UNKNOWN_VERSION))


__all__ = ["package_version", "pyproject_version"]
