"""Local preview server for a built site.

The generated output is plain static files; this application only serves them
so that directory URLs, the sitemap and runtime budget fetches can be checked
before publishing.
"""

from __future__ import annotations

import os
from pathlib import Path

from flask import Flask, jsonify, send_from_directory
from werkzeug.exceptions import NotFound

from taxgame.config.settings import OUTPUT_DIR_ENV
from taxgame.version import get_project_version

from .http import problem_response

INDEX_FILE = "index.html"


def _resolve_site_root(output_directory: Path | str | None) -> Path:
    if output_directory is not None:
        return Path(output_directory).resolve()
    return Path(os.getenv(OUTPUT_DIR_ENV, "dist")).expanduser().resolve()


def create_app(output_directory: Path | str | None = None) -> Flask:
    """Create a Flask application serving the site found in ``output_directory``."""

    app = Flask(__name__, static_folder=None)
    site_root = _resolve_site_root(output_directory)
    app.config["SITE_ROOT"] = site_root

    @app.route("/health", methods=["GET"])
    def health_check():
        """Report whether a build is present and which version served it."""

        built = (site_root / INDEX_FILE).is_file()
        payload = {
            "status": "ok" if built else "empty",
            "version": get_project_version(),
            "site_root": str(site_root),
        }
        return jsonify(payload)

    @app.route("/", defaults={"filename": ""}, methods=["GET"])
    @app.route("/<path:filename>", methods=["GET"])
    def serve_site(filename: str):
        """Serve a generated file; directory URLs resolve to their index page."""

        if not filename or filename.endswith("/"):
            filename = f"{filename}{INDEX_FILE}"
        elif (site_root / filename).is_dir():
            filename = f"{filename}/{INDEX_FILE}"
        return send_from_directory(site_root, filename)

    @app.errorhandler(NotFound)
    def handle_not_found(error: NotFound):
        problem = problem_response(
            "not_found", status=404, message="No such file in the built site"
        )
        return problem.to_response()

    return app


__all__ = ["create_app"]
