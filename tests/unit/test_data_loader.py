from pathlib import Path

import pytest

from taxgame.config.data_loader import DataRepository
from taxgame.errors import ConfigurationError, FatalConfigError, SkippableDataError

from conftest import country_meta, write_json


def test_global_countries_follow_config_order(data_tree: Path) -> None:
    repository = DataRepository(data_tree)

    countries = repository.global_countries(repository.load_site_config())

    assert [(country.id, country.name) for country in countries] == [
        ("alpha", "Alphaland"),
        ("beta", "Betaland"),
    ]


def test_meta_id_must_match_directory(data_tree: Path) -> None:
    write_json(data_tree / "countries" / "beta" / "meta.json", country_meta("other", "Other"))

    with pytest.raises(SkippableDataError, match="does not match directory"):
        DataRepository(data_tree).load_country_meta("beta")


def test_find_budget_returns_none_for_absent_year(data_tree: Path) -> None:
    repository = DataRepository(data_tree)

    assert repository.find_budget("alpha", "2024-25") is None
    assert repository.find_budget("alpha", "2025-26").year == "2025-26"


def test_invalid_documents_are_skippable(data_tree: Path) -> None:
    (data_tree / "countries" / "alpha" / "achievements.json").write_text("{", encoding="utf-8")
    write_json(data_tree / "countries" / "beta" / "achievements.json", {"minAmount": 1})
    write_json(data_tree / "countries" / "beta" / "budgets" / "2025-26.json", {"year": "2025-26"})
    repository = DataRepository(data_tree)

    with pytest.raises(SkippableDataError):
        repository.load_achievements("alpha")
    with pytest.raises(SkippableDataError):
        repository.load_achievements("beta")
    with pytest.raises(SkippableDataError):
        repository.load_budget("beta", "2025-26")


def test_duplicate_default_country_is_fatal(data_tree: Path) -> None:
    write_json(
        data_tree / "config.json",
        {
            "countries": [
                {"id": "alpha", "enabled": True, "default": True},
                {"id": "beta", "enabled": True, "default": True},
            ]
        },
    )

    with pytest.raises(FatalConfigError, match="Only one enabled country"):
        DataRepository(data_tree).load_site_config()


def test_documents_are_reread_by_new_repository(data_tree: Path) -> None:
    assert DataRepository(data_tree).load_language("en").headline == "Where does it go?"
    write_json(data_tree / "languages" / "en.json", {"headline": "Changed"})

    assert DataRepository(data_tree).load_language("en").headline == "Changed"


def test_undecodable_documents_are_skippable(data_tree: Path) -> None:
    (data_tree / "countries" / "beta" / "meta.json").write_bytes(b'{"id": "beta", "name": "\xff"}')
    (data_tree / "languages" / "fr.json").write_bytes(b'{"headline": "\xff"}')
    repository = DataRepository(data_tree)

    with pytest.raises(SkippableDataError, match="not valid UTF-8"):
        repository.load_country_meta("beta")
    with pytest.raises(SkippableDataError, match="not valid UTF-8"):
        repository.load_language("fr")


def test_read_errors_become_configuration_errors(data_tree: Path) -> None:
    with pytest.raises(ConfigurationError, match="could not be read"):
        DataRepository(data_tree)._read(data_tree / "countries")
