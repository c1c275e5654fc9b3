"""Project version lookup for the CLI and the preview server."""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

DISTRIBUTION: Final = "taxgame"
PYPROJECT: Final = Path(__file__).resolve().parents[2] / "pyproject.toml"

_VERSION_LINE = re.compile(r'^version\s*=\s*"(?P<version>[^"]+)"\s*$')


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Installed distribution version, or the one declared in ``pyproject.toml``."""

    try:
        return metadata.version(DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return read_declared_version(PYPROJECT)


def read_declared_version(pyproject: Path) -> str:
    """Return ``[project].version`` from a checkout's ``pyproject.toml``."""

    if not pyproject.is_file():
        raise RuntimeError(f"Unable to locate project metadata at {pyproject}")

    in_project = False
    for line in pyproject.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped.startswith("["):
            in_project = stripped == "[project]"
            continue
        match = _VERSION_LINE.match(stripped) if in_project else None
        if match:
            return match.group("version")

    raise RuntimeError(f"No [project] version declared in {pyproject}")


__all__ = ["get_project_version", "read_declared_version"]
