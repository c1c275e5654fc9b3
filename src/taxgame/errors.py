"""Exception hierarchy shared by the build pipeline and the runtime controller."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when data documents violate schema expectations."""


class FatalConfigError(ConfigurationError):
    """Raised when the build cannot proceed at all (e.g. ``config.json`` is missing)."""


class SkippableDataError(FileNotFoundError):
    """Raised when a per-country or per-page document is missing or invalid."""


class TemplateError(ConfigurationError):
    """Raised when the page template does not satisfy the injection contract."""


class TrendUnavailable(LookupError):
    """Raised when year-over-year trends cannot be computed for a budget."""


class FiscalYearParseError(TrendUnavailable, ValueError):
    """Raised when a budget key does not follow the ``YYYY-YY`` convention."""


class RuntimeFetchError(RuntimeError):
    """Raised when a budget document cannot be fetched at runtime."""


class InvalidSalaryError(ValueError):
    """Raised when the salary input is not a finite positive number."""


__all__ = [
    "ConfigurationError",
    "FatalConfigError",
    "FiscalYearParseError",
    "InvalidSalaryError",
    "RuntimeFetchError",
    "SkippableDataError",
    "TemplateError",
    "TrendUnavailable",
]
