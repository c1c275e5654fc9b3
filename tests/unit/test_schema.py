"""Unit coverage for the document schema and its load-time invariants."""

from __future__ import annotations

import pytest

from taxgame.config.data_loader import parse_document
from taxgame.config.schema import (
    BudgetDocument,
    ClientPayload,
    CountryMeta,
    LanguagePack,
    SiteConfig,
    TaxRules,
)
from taxgame.errors import ConfigurationError

from conftest import budget_document, country_meta


@pytest.mark.parametrize(
    ("brackets", "message"),
    [
        ([], "At least one tax bracket"),
        ([{"limit": 100, "rate": 0.1}], "open upper bound"),
        (
            [{"limit": 200, "rate": 0.1}, {"limit": 100, "rate": 0.2}, {"limit": None, "rate": 0.3}],
            "ascending",
        ),
        ([{"limit": None, "rate": 0.1}, {"limit": None, "rate": 0.2}], "final tax bracket may be unbounded"),
        ([{"limit": None, "rate": -0.1}], "non-negative"),
    ],
)
def test_malformed_brackets_raise_configuration_error(brackets: list, message: str) -> None:
    with pytest.raises(ConfigurationError, match=message):
        parse_document(TaxRules, {"brackets": brackets}, "rules")


def test_tax_rules_default_deduction_and_cess() -> None:
    rules = TaxRules.model_validate({"brackets": [{"limit": None, "rate": 0.1}]})

    assert rules.standard_deduction == 0
    assert rules.cess == 0


def test_site_config_rejects_two_enabled_defaults() -> None:
    payload = {
        "countries": [
            {"id": "a", "enabled": True, "default": True},
            {"id": "b", "enabled": True, "default": True},
        ]
    }

    with pytest.raises(ConfigurationError, match="Only one enabled country"):
        parse_document(SiteConfig, payload, "config.json")


def test_site_config_ignores_default_flag_on_disabled_country() -> None:
    config = SiteConfig.model_validate(
        {
            "countries": [
                {"id": "a", "enabled": False, "default": True},
                {"id": "b", "enabled": True, "default": True},
            ]
        }
    )

    assert [country.id for country in config.enabled_countries] == ["b"]
    assert config.default_country is not None and config.default_country.id == "b"


def test_country_meta_requires_default_language_to_be_available() -> None:
    with pytest.raises(ConfigurationError, match="not listed in availableLanguages"):
        parse_document(CountryMeta, country_meta("x", "X", defaultLanguage="de"), "meta")


def test_country_meta_keeps_unknown_keys() -> None:
    meta = CountryMeta.model_validate(country_meta("x", "X", motto="hello"))

    assert meta.to_document()["motto"] == "hello"
    assert "locale" not in meta.to_document()


def test_payload_serialisation_keeps_open_bracket_and_omits_missing_trend() -> None:
    budget = BudgetDocument.model_validate(budget_document("2026-27", {"health": 1.0}))
    payload = ClientPayload(
        meta=CountryMeta.model_validate(country_meta("x", "X")),
        budget=budget,
        strings=LanguagePack(headline="Hi"),
        current_language="en",
    )

    document = payload.to_document()

    assert document["budget"]["taxRules"]["brackets"][-1] == {"limit": None, "rate": 0.2}
    assert document["budget"]["expenditure"]["categories"][0] == {
        "id": "health",
        "percent": 1.0,
        "icon": "*",
    }
    assert document["currentLanguage"] == "en"
    assert document["globalCountries"] == []


def test_language_pack_exposes_extra_strings() -> None:
    pack = LanguagePack.model_validate({"headline": "H", "citizen_rank": "Rank", "empty": ""})

    assert pack.extra_string("citizen_rank") == "Rank"
    assert pack.extra_string("empty") is None
    assert pack.extra_string("missing") is None
