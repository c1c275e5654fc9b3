"""Page template with a JSON data-injection slot and named text fields."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from taxgame.config.schema import DocumentModel
from taxgame.errors import TemplateError

DATA_INJECTION_TOKEN = "DATA_INJECTION"
_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")

# Characters that could terminate or confuse an inline <script> block.
_SCRIPT_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}
_SCRIPT_UNSAFE = re.compile("[<>&\u2028\u2029]")


def script_safe_json(data: Any) -> str:
    """Serialise ``data`` as a JSON literal that can sit inside a ``<script>`` tag."""

    if isinstance(data, DocumentModel):
        data = data.to_document()
    encoded = json.dumps(data, ensure_ascii=False, separators=(",", ":"))
    return _SCRIPT_UNSAFE.sub(lambda match: _SCRIPT_ESCAPES[match.group(0)], encoded)


@dataclass(frozen=True)
class PageFields:
    """Text placeholders of one generated page."""

    lang: str
    country_id: str
    title: str
    description: str
    headline: str
    subtext: str
    salary_input_label: str
    cta: str
    currency_symbol: str
    disclaimer: str
    canonical_url: str
    subheadline_blink: str | None = None

    def as_placeholders(self) -> dict[str, str | None]:
        """Map template identifiers to values."""

        return {
            "lang": self.lang,
            "countryId": self.country_id,
            "title": self.title,
            "description": self.description,
            "headline": self.headline,
            "subtext": self.subtext,
            "salaryInputLabel": self.salary_input_label,
            "cta": self.cta,
            "currencySymbol": self.currency_symbol,
            "disclaimer": self.disclaimer,
            "canonicalUrl": self.canonical_url,
            "subheadline_blink": self.subheadline_blink,
        }


class PageTemplate:
    """HTML template holding exactly one ``{{DATA_INJECTION}}`` token.

    Every other ``{{identifier}}`` token is a text placeholder. Identifiers
    without a value render as an empty string.
    """

    def __init__(self, source: str) -> None:
        injections = sum(
            1 for match in _PLACEHOLDER.finditer(source)
            if match.group(1) == DATA_INJECTION_TOKEN
        )
        if injections != 1:
            raise TemplateError(
                f"Template must contain exactly one {{{{{DATA_INJECTION_TOKEN}}}}} token, "
                f"found {injections}"
            )
        self.source = source

    @classmethod
    def from_path(cls, path: Path) -> PageTemplate:
        if not path.is_file():
            raise TemplateError(f"Page template not found: {path}")
        return cls(path.read_text(encoding="utf-8"))

    @property
    def placeholders(self) -> tuple[str, ...]:
        """Identifiers referenced by the template, in order of first use."""

        names = dict.fromkeys(match.group(1) for match in _PLACEHOLDER.finditer(self.source))
        names.pop(DATA_INJECTION_TOKEN, None)
        return tuple(names)

    def render(
        self,
        fields: PageFields | Mapping[str, str | None],
        payload: DocumentModel | Mapping[str, Any],
    ) -> str:
        """Substitute ``payload`` and ``fields`` in a single pass.

        Substituted values are never scanned again, so text that happens to
        contain ``{{...}}`` is emitted verbatim.
        """

        values = fields.as_placeholders() if isinstance(fields, PageFields) else dict(fields)
        injected = script_safe_json(payload)

        def _substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            if name == DATA_INJECTION_TOKEN:
                return injected
            return values.get(name) or ""

        return _PLACEHOLDER.sub(_substitute, self.source)


__all__ = ["DATA_INJECTION_TOKEN", "PageFields", "PageTemplate", "script_safe_json"]
