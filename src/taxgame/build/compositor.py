"""Compose every country × language page from the data tree.

The compositor is the build-time half of the payload contract: for each
enabled country it loads metadata, the default budget and achievements,
applies year-over-year trends, then localizes the budget once per available
language and renders the page template. The runtime controller rebuilds the
``budget`` slice of the same payload with the same helpers when the visitor
switches years, so both sides must keep using :func:`localize` and the tax
calculators from :mod:`taxgame.services`.

Composition is pure: :meth:`PageCompositor.compose` returns a
:class:`BuildReport` and nothing touches the output directory until
:func:`write_site` is called.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from html import escape
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

from taxgame.config.data_loader import DataRepository
from taxgame.config.schema import (
    Achievement,
    BudgetDocument,
    ClientPayload,
    CountryConfig,
    CountryMeta,
    CountrySummary,
    LanguagePack,
    SiteConfig,
)
from taxgame.config.settings import BuildSettings
from taxgame.errors import SkippableDataError
from taxgame.localization import localize
from taxgame.services.trends import resolve_trends

from .assets import copy_static_assets
from .sitemap import render_sitemap
from .templates import PageFields, PageTemplate

_LOGGER = logging.getLogger(__name__)

INDEX_FILE = "index.html"
SITEMAP_FILE = "sitemap.xml"


@dataclass(frozen=True)
class RenderedPage:
    """One generated HTML document and where it lives."""

    path: PurePosixPath
    url: str
    canonical_url: str
    html: str
    country_id: str
    language: str
    is_root: bool = False


@dataclass
class BuildReport:
    """Outcome of a composition pass."""

    base_url: str
    pages: list[RenderedPage] = field(default_factory=list)
    root_page: RenderedPage | None = None
    skipped: list[str] = field(default_factory=list)

    @property
    def root_url(self) -> str:
        return f"{self.base_url}/"

    @property
    def sitemap_urls(self) -> list[str]:
        """Root URL followed by every folder page URL, without duplicates."""

        urls = dict.fromkeys([self.root_url])
        urls.update(dict.fromkeys(page.url for page in self.pages if not page.is_root))
        return list(urls)


def page_directory(meta: CountryMeta, language: str) -> PurePosixPath:
    """``<country>/`` for the default language, ``<country>/<lang>/`` otherwise."""

    if language == meta.default_language:
        return PurePosixPath(meta.id)
    return PurePosixPath(meta.id, language)


def page_url(base_url: str, meta: CountryMeta, language: str) -> str:
    return f"{base_url}/{page_directory(meta, language)}/"


def build_page_fields(
    meta: CountryMeta, budget: BudgetDocument, pack: LanguagePack, language: str, canonical_url: str
) -> PageFields:
    """Flatten language strings and country metadata into template fields."""

    return PageFields(
        lang=language,
        country_id=meta.id,
        title=f"{pack.headline} | {meta.name}",
        description=pack.subtext,
        headline=pack.headline,
        subtext=f"{pack.subtext} • {budget.year}",
        salary_input_label=pack.salary_input_label,
        cta=pack.cta,
        currency_symbol=meta.currency_symbol,
        disclaimer=pack.disclaimer,
        canonical_url=canonical_url,
        subheadline_blink=pack.extra_string("subheadline_blink"),
    )


def render_redirect(target: str, canonical_url: str) -> str:
    """Minimal root document pointing visitors at ``target``."""

    target = escape(target, quote=True)
    canonical_url = escape(canonical_url, quote=True)
    return (
        "<!DOCTYPE html>\n"
        '<html><head><meta charset="utf-8">'
        f'<meta http-equiv="refresh" content="0; url={target}">'
        f'<link rel="canonical" href="{canonical_url}">'
        "<title>Redirecting</title></head>"
        f'<body><a href="{target}">{target}</a></body></html>\n'
    )


class PageCompositor:
    """Render the pages of every enabled country and language."""

    def __init__(self, repository: DataRepository, template: PageTemplate, base_url: str) -> None:
        self.repository = repository
        self.template = template
        self.base_url = base_url.rstrip("/")

    def compose(self) -> BuildReport:
        """Compose all pages; raises ``FatalConfigError`` without ``config.json``."""

        config = self.repository.load_site_config()
        report = BuildReport(base_url=self.base_url)
        global_countries = self.repository.global_countries(config)

        for country in config.enabled_countries:
            self._compose_country(country, global_countries, report)

        if report.root_page is None and report.pages:
            report.root_page = self._redirect_root(config, report)

        return report

    def _compose_country(
        self,
        country: CountryConfig,
        global_countries: tuple[CountrySummary, ...],
        report: BuildReport,
    ) -> None:
        try:
            meta = self.repository.load_country_meta(country.id)
            _LOGGER.info("Processing %s", meta.name)
            budget = self.repository.load_budget(country.id, meta.default_budget)
            achievements = self.repository.load_achievements(country.id)
        except SkippableDataError as error:
            _LOGGER.error("Skipping country '%s': %s", country.id, error)
            report.skipped.append(f"{country.id}: {error}")
            return

        budget = resolve_trends(self.repository, country.id, budget, meta.default_budget)

        for language in meta.available_languages:
            try:
                pack = self.repository.load_language(language)
            except SkippableDataError as error:
                _LOGGER.error("Skipping page %s/%s: %s", country.id, language, error)
                report.skipped.append(f"{country.id}/{language}: {error}")
                continue

            self._compose_page(
                country, meta, budget, achievements, global_countries, pack, language, report
            )

    def _compose_page(
        self,
        country: CountryConfig,
        meta: CountryMeta,
        budget: BudgetDocument,
        achievements: tuple[Achievement, ...],
        global_countries: tuple[CountrySummary, ...],
        pack: LanguagePack,
        language: str,
        report: BuildReport,
    ) -> None:
        is_root = country.default and language == meta.default_language

        payload = ClientPayload(
            meta=meta,
            budget=localize(budget, pack),
            achievements=achievements,
            global_countries=global_countries,
            strings=pack,
            current_language=language,
        )

        url = page_url(self.base_url, meta, language)
        canonical_url = report.root_url if is_root else url
        fields = build_page_fields(meta, budget, pack, language, canonical_url)
        html = self.template.render(fields, payload)

        directory = page_directory(meta, language)
        report.pages.append(
            RenderedPage(
                path=directory / INDEX_FILE,
                url=url,
                canonical_url=canonical_url,
                html=html,
                country_id=meta.id,
                language=language,
            )
        )
        _LOGGER.info("Generated %s/%s", directory, INDEX_FILE)

        if is_root:
            _LOGGER.info("Generating root homepage from %s", directory)
            report.root_page = RenderedPage(
                path=PurePosixPath(INDEX_FILE),
                url=report.root_url,
                canonical_url=report.root_url,
                html=html,
                country_id=meta.id,
                language=language,
                is_root=True,
            )

    def _redirect_root(self, config: SiteConfig, report: BuildReport) -> RenderedPage:
        first = report.pages[0]
        if config.default_country is None:
            _LOGGER.warning("No default country configured; root redirects to %s", first.url)
        else:
            _LOGGER.warning(
                "Default country '%s' produced no homepage; root redirects to %s",
                config.default_country.id,
                first.url,
            )
        target = urlsplit(first.url).path
        return RenderedPage(
            path=PurePosixPath(INDEX_FILE),
            url=report.root_url,
            canonical_url=first.url,
            html=render_redirect(target, first.url),
            country_id=first.country_id,
            language=first.language,
            is_root=True,
        )


def write_site(report: BuildReport, output_directory: Path, *, changefreq: str = "weekly") -> list[Path]:
    """Write pages and the sitemap under ``output_directory`` (full overwrite)."""

    written: list[Path] = []
    pages = list(report.pages)
    if report.root_page is not None:
        pages.append(report.root_page)

    for page in pages:
        target = output_directory / Path(page.path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(page.html, encoding="utf-8")
        written.append(target)

    sitemap = output_directory / SITEMAP_FILE
    sitemap.write_text(render_sitemap(report.sitemap_urls, changefreq=changefreq), encoding="utf-8")
    written.append(sitemap)
    return written


def build_site(settings: BuildSettings) -> BuildReport:
    """Run a full build: compose pages, write them and copy static assets."""

    _LOGGER.info("Starting build into %s", settings.output_directory)
    repository = DataRepository(settings.data_directory)
    template = PageTemplate.from_path(settings.template)

    report = PageCompositor(repository, template, settings.base_url).compose()

    settings.output_directory.mkdir(parents=True, exist_ok=True)
    copy_static_assets(settings)
    write_site(report, settings.output_directory, changefreq=settings.sitemap_changefreq)

    _LOGGER.info(
        "Build complete: %d page(s), %d skipped", len(report.pages), len(report.skipped)
    )
    return report


__all__ = [
    "BuildReport",
    "PageCompositor",
    "RenderedPage",
    "build_page_fields",
    "build_site",
    "page_directory",
    "page_url",
    "render_redirect",
    "write_site",
]
