"""
Project identity (name, version) stamped on every structured log record.

Looked up once per process: from the installed distribution's metadata when the
package is installed, otherwise from the `[project]` table of the nearest
pyproject.toml (source checkouts, editable installs without metadata).
"""

from functools import lru_cache
from pathlib import Path
from importlib import metadata as importlib_metadata
import tomllib

DISTRIBUTION = "eschool-repository"


def find_pyproject(start: Path, max_up: int = 5) -> Path | None:
    """Walk up from `start` (at most `max_up` levels) to the first pyproject.toml."""
    for directory in [start, *start.parents][:max_up]:
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _pyproject_table(start: Path | None = None) -> dict:
    """Return the `[project]` table, or {} when there is none or it cannot be read."""
    path = find_pyproject(start or Path(__file__).resolve().parent)
    if path is None:
        return {}
    try:
        with path.open("rb") as f:
            table = tomllib.load(f).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return table if isinstance(table, dict) else {}


@lru_cache()
def project_metadata() -> dict[str, str | None]:
    """
    Name and version of this project.

    Returns:
        dict: {"name": ..., "version": ...}; a value is None when no source knows it.
    """
    try:
        installed = importlib_metadata.metadata(DISTRIBUTION)
        return {"name": installed["Name"], "version": installed["Version"]}
    except importlib_metadata.PackageNotFoundError:
        table = _pyproject_table()
        return {"name": table.get("name"), "version": table.get("version")}


def get_project_name(default: str | None = None) -> str | None:
    return project_metadata()["name"] or default


def get_project_version(default: str = "unknown") -> str:
    return project_metadata()["version"] or default


__all__ = [
    "DISTRIBUTION",
    "find_pyproject",
    "project_metadata",
    "get_project_name",
    "get_project_version",
]
