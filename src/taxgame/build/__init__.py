"""Static site build: page composition, sitemap and asset mirroring."""

from .compositor import BuildReport, PageCompositor, RenderedPage, build_site, write_site
from .templates import PageFields, PageTemplate

__all__ = [
    "BuildReport",
    "PageCompositor",
    "PageFields",
    "PageTemplate",
    "RenderedPage",
    "build_site",
    "write_site",
]
