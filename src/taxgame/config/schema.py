"""Pydantic models describing the country, budget and language documents."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    ValidationError,
    field_validator,
    model_serializer,
    model_validator,
)
from typing_extensions import Self

from taxgame.errors import ConfigurationError


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class DocumentModel(BaseModel):
    """Frozen base for authored JSON documents.

    Unknown keys are preserved so that they reach the client payload untouched,
    and optional fields that were never set are omitted on serialisation.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    @model_serializer(mode="wrap")
    def _omit_missing_optionals(
        self, handler: SerializerFunctionWrapHandler
    ) -> dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-compatible document using the original key names."""

        return self.model_dump(mode="json", by_alias=True)


# --- Site configuration -------------------------------------------------------


class CountryConfig(ImmutableModel):
    """One entry of ``config.json`` describing a known country."""

    id: str
    enabled: bool = False
    default: bool = False


class SiteConfig(ImmutableModel):
    """Top-level ``config.json`` document."""

    countries: Sequence[CountryConfig] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _validate_countries(self) -> Self:
        seen: set[str] = set()
        for country in self.countries:
            if country.id in seen:
                raise ConfigurationError(f"Duplicate country '{country.id}' in config.json")
            seen.add(country.id)

        defaults = [country.id for country in self.enabled_countries if country.default]
        if len(defaults) > 1:
            raise ConfigurationError(
                f"Only one enabled country may be the default, found: {', '.join(defaults)}"
            )
        return self

    @property
    def enabled_countries(self) -> tuple[CountryConfig, ...]:
        return tuple(country for country in self.countries if country.enabled)

    @property
    def default_country(self) -> CountryConfig | None:
        for country in self.enabled_countries:
            if country.default:
                return country
        return None


# --- Country metadata ---------------------------------------------------------


class CountryMeta(DocumentModel):
    """Immutable description of a country (``countries/<id>/meta.json``)."""

    id: str
    name: str
    flag: str = ""
    currency: str
    currency_symbol: str = Field(alias="currencySymbol")
    locale: str | None = None
    number_format: Mapping[str, Any] | None = Field(default=None, alias="numberFormat")
    background: str = ""
    default_budget: str = Field(alias="defaultBudget")
    default_language: str = Field(alias="defaultLanguage")
    available_languages: tuple[str, ...] = Field(alias="availableLanguages")
    available_budgets: tuple[str, ...] | None = Field(default=None, alias="availableBudgets")

    @field_validator("default_budget", mode="before")
    @classmethod
    def _coerce_budget_key(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @model_validator(mode="after")
    def _validate_languages(self) -> Self:
        if not self.available_languages:
            raise ConfigurationError(f"Country '{self.id}' declares no available languages")
        if self.default_language not in self.available_languages:
            raise ConfigurationError(
                f"Default language '{self.default_language}' of '{self.id}' "
                "is not listed in availableLanguages"
            )
        return self

    @property
    def budget_years(self) -> tuple[str, ...]:
        """Budget years offered to the year switcher."""

        return self.available_budgets or (self.default_budget,)


class CountrySummary(DocumentModel):
    """Entry of the global country list shown by the country switcher."""

    id: str
    name: str
    flag: str = ""


# --- Budget documents ---------------------------------------------------------


class TaxBracket(ImmutableModel):
    """Represents a single progressive tax bracket.

    ``upper_bound`` is the cumulative income ceiling of the bracket; ``None``
    marks the open-ended final bracket.
    """

    upper_bound: float | None = Field(default=None, alias="limit")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        if self.rate < 0:
            raise ConfigurationError("Tax rates must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= 0:
            raise ConfigurationError("Bracket limits must be positive values")
        return self


class TaxRules(ImmutableModel):
    """Progressive schedule with optional standard deduction and cess."""

    standard_deduction: float = Field(default=0.0, alias="standardDeduction")
    cess: float = 0.0
    brackets: tuple[TaxBracket, ...]

    @field_validator("standard_deduction", "cess", mode="before")
    @classmethod
    def _coerce_missing(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @model_validator(mode="after")
    def _validate_rules(self) -> Self:
        if self.standard_deduction < 0:
            raise ConfigurationError("Standard deduction must be non-negative")
        if self.cess < 0:
            raise ConfigurationError("Cess must be non-negative")
        self._validate_bracket_sequence(self.brackets)
        return self

    @staticmethod
    def _validate_bracket_sequence(brackets: Sequence[TaxBracket]) -> None:
        if not brackets:
            raise ConfigurationError("At least one tax bracket must be defined")
        last_upper: float | None = None
        for bracket in brackets[:-1]:
            upper = bracket.upper_bound
            if upper is None:
                raise ConfigurationError("Only the final tax bracket may be unbounded")
            if last_upper is not None and upper <= last_upper:
                raise ConfigurationError("Tax brackets must be in ascending order")
            last_upper = upper
        if brackets[-1].upper_bound is not None:
            raise ConfigurationError("Final tax bracket must have an open upper bound")


class BudgetCategory(DocumentModel):
    """One expenditure line item expressed as a share of total revenue.

    ``label`` and ``change`` are derived by the pipeline and never authored.
    """

    id: str
    percent: float
    icon: str = ""
    amount: float | None = None
    label: str | None = None
    change: float | None = None

    @model_validator(mode="after")
    def _validate_percent(self) -> Self:
        if self.percent < 0:
            raise ConfigurationError(f"Category '{self.id}' has a negative percent")
        return self


class Expenditure(DocumentModel):
    categories: tuple[BudgetCategory, ...] = ()


class BudgetDocument(DocumentModel):
    """Budget of one country for one year (``budgets/<year>.json``)."""

    year: str
    source_url: str | None = Field(default=None, alias="sourceUrl")
    tax_rules: TaxRules = Field(alias="taxRules")
    expenditure: Expenditure = Field(default_factory=Expenditure)

    @field_validator("year", mode="before")
    @classmethod
    def _coerce_year(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @property
    def categories(self) -> tuple[BudgetCategory, ...]:
        return self.expenditure.categories

    def with_categories(self, categories: Sequence[BudgetCategory]) -> BudgetDocument:
        """Return a copy of the document with ``categories`` replaced."""

        expenditure = self.expenditure.model_copy(update={"categories": tuple(categories)})
        return self.model_copy(update={"expenditure": expenditure})


# --- Language packs and achievements ------------------------------------------


class LanguagePack(DocumentModel):
    """Human-readable strings for one language, shared by every country."""

    headline: str = ""
    subtext: str = ""
    cta: str = ""
    disclaimer: str = ""
    salary_input_label: str = Field(default="", alias="salaryInputLabel")
    categories: Mapping[str, str] = Field(default_factory=dict)

    def extra_string(self, key: str) -> str | None:
        """Return an additional UI string such as ``citizen_rank`` when present."""

        value = (self.model_extra or {}).get(key)
        return str(value) if value not in (None, "") else None


class Achievement(DocumentModel):
    """Threshold-based unlock from ``achievements.json``."""

    min_amount: float = Field(alias="minAmount")
    icon: str = ""
    label: str
    description: str = ""


# --- Derived structures -------------------------------------------------------


class CategoryBreakdownEntry(DocumentModel):
    """Share of a tax total attributed to one expenditure category."""

    id: str
    percent: float
    icon: str = ""
    label: str
    change: float | None = None
    amount: int


class ClientPayload(DocumentModel):
    """Bundle embedded in every generated page and consumed by the runtime."""

    meta: CountryMeta
    budget: BudgetDocument
    achievements: tuple[Achievement, ...] = ()
    global_countries: tuple[CountrySummary, ...] = Field(
        default_factory=tuple, alias="globalCountries"
    )
    strings: LanguagePack
    current_language: str = Field(alias="currentLanguage")


__all__ = [
    "Achievement",
    "BudgetCategory",
    "BudgetDocument",
    "CategoryBreakdownEntry",
    "ClientPayload",
    "ConfigurationError",
    "CountryConfig",
    "CountryMeta",
    "CountrySummary",
    "DocumentModel",
    "Expenditure",
    "ImmutableModel",
    "LanguagePack",
    "SiteConfig",
    "TaxBracket",
    "TaxRules",
    "ValidationError",
]
