"""Test configuration utilities and shared fixtures."""

import json
import sys
from pathlib import Path
from typing import Any

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from taxgame.app import create_app  # noqa: E402
from taxgame.build.compositor import build_site  # noqa: E402
from taxgame.config.settings import BuildSettings  # noqa: E402

TEMPLATE = """<!DOCTYPE html>
<html lang="{{lang}}">
<head><title>{{title}}</title><link rel="canonical" href="{{canonicalUrl}}"></head>
<body data-country="{{countryId}}">
<h1>{{headline}}</h1><p class="subtext">{{subtext}}</p><p>{{unknownField}}</p>
<span>{{currencySymbol}}</span><button>{{cta}}</button><small>{{disclaimer}}</small>
<script>window.TAX_DATA = {{DATA_INJECTION}};</script>
</body>
</html>
"""

BRACKETS = [
    {"limit": 500000, "rate": 0},
    {"limit": 1000000, "rate": 0.1},
    {"limit": None, "rate": 0.2},
]


def budget_document(year: str, shares: dict[str, float], **tax_rules: Any) -> dict[str, Any]:
    """Return a raw budget document with ``shares`` as categories."""

    return {
        "year": year,
        "sourceUrl": f"https://budget.example/{year}",
        "taxRules": {"brackets": BRACKETS, **tax_rules},
        "expenditure": {
            "categories": [
                {"id": category_id, "percent": percent, "icon": "*"}
                for category_id, percent in shares.items()
            ]
        },
    }


def country_meta(country_id: str, name: str, **overrides: Any) -> dict[str, Any]:
    meta: dict[str, Any] = {
        "id": country_id,
        "name": name,
        "flag": "F",
        "currency": "XTS",
        "currencySymbol": "¤",
        "background": "bg.jpg",
        "defaultBudget": "2026-27",
        "defaultLanguage": "en",
        "availableLanguages": ["en"],
        "availableBudgets": ["2026-27", "2025-26"],
    }
    meta.update(overrides)
    return {key: value for key, value in meta.items() if value is not None}


def write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return path


LANGUAGE_EN = {
    "headline": "Where does it go?",
    "subtext": "Your tax, split",
    "cta": "Go",
    "disclaimer": "Estimates only",
    "salaryInputLabel": "Salary",
    "citizen_rank": "Rank",
    "categories": {"health": "Health", "roads": "Roads", "defence": "Defence"},
}

LANGUAGE_FR = {
    "headline": "Où va-t-il ?",
    "subtext": "Votre impôt, réparti",
    "cta": "Calculer",
    "disclaimer": "Estimations",
    "salaryInputLabel": "Salaire",
    "categories": {"health": "Santé"},
}


@pytest.fixture()
def data_tree(tmp_path: Path) -> Path:
    """Data tree with a default bilingual country, a second country and a disabled one."""

    root = tmp_path / "data"
    write_json(
        root / "config.json",
        {
            "countries": [
                {"id": "alpha", "enabled": True, "default": True},
                {"id": "beta", "enabled": True, "default": False},
                {"id": "gamma", "enabled": False, "default": False},
            ]
        },
    )

    alpha = root / "countries" / "alpha"
    write_json(
        alpha / "meta.json",
        country_meta("alpha", "Alphaland", availableLanguages=["en", "fr"]),
    )
    write_json(
        alpha / "budgets" / "2026-27.json",
        budget_document("2026-27", {"health": 0.25, "roads": 0.35, "space": 0.4}, cess=0.04),
    )
    write_json(
        alpha / "budgets" / "2025-26.json",
        budget_document("2025-26", {"health": 0.20, "roads": 0.0, "defence": 0.8}, cess=0.04),
    )
    write_json(
        alpha / "achievements.json",
        [
            {"minAmount": 1, "icon": "a", "label": "First", "description": "Paid tax"},
            {"minAmount": 100000, "icon": "b", "label": "Builder", "description": "Paid a lot"},
        ],
    )

    beta = root / "countries" / "beta"
    write_json(
        beta / "meta.json",
        country_meta("beta", "Betaland", defaultBudget="2025-26", availableBudgets=None),
    )
    write_json(beta / "budgets" / "2025-26.json", budget_document("2025-26", {"health": 1.0}))
    write_json(beta / "achievements.json", [])

    write_json(root / "languages" / "en.json", LANGUAGE_EN)
    write_json(root / "languages" / "fr.json", LANGUAGE_FR)
    return root


@pytest.fixture()
def template_path(tmp_path: Path) -> Path:
    """Client directory with a page template, robots.txt and a stylesheet."""

    client = tmp_path / "client"
    path = client / "templates" / "index.html"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(TEMPLATE, encoding="utf-8")
    (client / "robots.txt").write_text("User-agent: *\n", encoding="utf-8")
    (client / "styles").mkdir()
    (client / "styles" / "main.css").write_text("body {}\n", encoding="utf-8")
    return path


@pytest.fixture()
def build_settings(tmp_path: Path, data_tree: Path, template_path: Path) -> BuildSettings:
    return BuildSettings(
        base_url="https://tax.example",
        data_directory=data_tree,
        client_directory=template_path.parents[1],
        output_directory=tmp_path / "dist",
        template=template_path,
    )


@pytest.fixture()
def built_site(build_settings: BuildSettings) -> Path:
    """Output directory of a complete build of ``data_tree``."""

    build_site(build_settings)
    return build_settings.output_directory


@pytest.fixture()
def app(built_site: Path) -> Flask:
    """Return a preview application serving the built site."""

    application = create_app(built_site)
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the preview app."""

    return app.test_client()
