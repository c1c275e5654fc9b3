"""Copy static assets and the raw data tree next to the generated pages."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - only for static type checkers
    from taxgame.config.settings import BuildSettings

_LOGGER = logging.getLogger(__name__)

ROBOTS_FILE = "robots.txt"


def copy_tree(source: Path, destination: Path) -> None:
    shutil.copytree(source, destination, dirs_exist_ok=True)


def copy_static_assets(settings: BuildSettings) -> None:
    """Mirror asset directories, the data tree and ``robots.txt`` into the output."""

    output = settings.output_directory
    client = settings.client_directory

    for name in settings.asset_directories:
        source = client / name
        if source.is_dir():
            copy_tree(source, output / "assets" / name)
        else:
            _LOGGER.debug("Asset directory %s not present; skipping", source)

    # Budgets for other years are fetched from here at runtime.
    copy_tree(settings.data_directory, output / "data")

    robots = client / ROBOTS_FILE
    if robots.is_file():
        shutil.copy2(robots, output / ROBOTS_FILE)


__all__ = ["ROBOTS_FILE", "copy_static_assets", "copy_tree"]
