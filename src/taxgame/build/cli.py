"""Command line entry point for building the static site."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from taxgame.config.settings import load_settings
from taxgame.errors import ConfigurationError
from taxgame.version import get_project_version

from .compositor import build_site

_LOGGER = logging.getLogger(__name__)


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate the localized country pages, sitemap and data mirror."
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Path to taxgame.yaml (defaults to $TAXGAME_SETTINGS or ./taxgame.yaml)",
    )
    parser.add_argument("--data", type=Path, default=None, help="Override the data directory")
    parser.add_argument("--output", type=Path, default=None, help="Override the output directory")
    parser.add_argument("--base-url", default=None, help="Override the public site URL")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=get_project_version())
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Build the site and return a process exit code."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides = {
        "data_directory": args.data.resolve() if args.data else None,
        "output_directory": args.output.resolve() if args.output else None,
        "base_url": args.base_url,
    }

    try:
        settings = load_settings(args.settings, overrides=overrides)
        report = build_site(settings)
    except FileNotFoundError as error:
        _LOGGER.error("Build aborted: %s", error)
        return 1
    except ConfigurationError as error:
        _LOGGER.error("Build aborted: %s", error)
        return 1

    for reason in report.skipped:
        _LOGGER.warning("Skipped %s", reason)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
