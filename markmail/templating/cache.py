"""Thread-safe cache of compiled templates and layouts.

Entries are populated lazily on first use and never evicted: the template
catalog is static for the lifetime of the process. Hits are served by a
plain dictionary read without locking. Misses take the cache lock and check
again before reading and compiling, so racing callers compile a missing key
at most once. Failed reads and compiles are not cached.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import posixpath
import threading
from typing import TYPE_CHECKING, Any

from markmail.core.exceptions import (
    LayoutNotFoundError,
    MailerError,
    RenderFailedError,
    TemplateNotFoundError,
)
from markmail.metrics import template_cache_lookups_total

from .frontmatter import parse_template
from .substitution import SubstitutionEngine

if TYPE_CHECKING:
    from collections.abc import Mapping

    from jinja2 import Template

    from .sources import TemplateSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedTemplate:
    """Compiled template body together with its frontmatter metadata."""

    name: str
    metadata: Mapping[str, Any]
    template: Template


class TemplateCache:
    """Memoizes parsed templates and compiled layouts.

    Example:
        cache = TemplateCache(FileSystemSource("emails"))
        cached = cache.get_template("welcome.md")
        layout = cache.get_layout("base.html")
    """

    def __init__(
        self,
        source: TemplateSource,
        *,
        template_dir: str = ".",
        layout_dir: str = "layouts",
        body_engine: SubstitutionEngine | None = None,
        layout_engine: SubstitutionEngine | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            source: Where template and layout bytes are read from.
            template_dir: Directory of templates within the source.
            layout_dir: Directory of layouts within the source.
            body_engine: Engine compiling template bodies (no autoescape).
            layout_engine: Engine compiling layouts (autoescape).
        """
        self.source = source
        self.template_dir = template_dir or "."
        self.layout_dir = layout_dir or "layouts"
        self.body_engine = body_engine or SubstitutionEngine()
        self.layout_engine = layout_engine or SubstitutionEngine(autoescape=True)

        self._templates: dict[str, CachedTemplate] = {}
        self._layouts: dict[str, Template] = {}
        self._lock = threading.Lock()

    def get_template(self, name: str) -> CachedTemplate:
        """Get a compiled template, loading it on first use.

        Raises:
            TemplateNotFoundError: If the source has no such template.
            RenderFailedError: If the frontmatter or body fails to parse.
        """
        cached = self._templates.get(name)
        if cached is not None:
            template_cache_lookups_total.labels(kind="template", result="hit").inc()
            return cached

        with self._lock:
            cached = self._templates.get(name)
            if cached is not None:
                template_cache_lookups_total.labels(kind="template", result="hit").inc()
                return cached

            try:
                cached = self._load_template(name)
            except MailerError:
                template_cache_lookups_total.labels(kind="template", result="error").inc()
                raise

            self._templates[name] = cached
            template_cache_lookups_total.labels(kind="template", result="miss").inc()
            return cached

    def get_layout(self, name: str) -> Template:
        """Get a compiled layout, loading it on first use.

        Raises:
            LayoutNotFoundError: If the source has no such layout.
            RenderFailedError: If the layout fails to parse.
        """
        layout = self._layouts.get(name)
        if layout is not None:
            template_cache_lookups_total.labels(kind="layout", result="hit").inc()
            return layout

        with self._lock:
            layout = self._layouts.get(name)
            if layout is not None:
                template_cache_lookups_total.labels(kind="layout", result="hit").inc()
                return layout

            try:
                layout = self._load_layout(name)
            except MailerError:
                template_cache_lookups_total.labels(kind="layout", result="error").inc()
                raise

            self._layouts[name] = layout
            template_cache_lookups_total.labels(kind="layout", result="miss").inc()
            return layout

    def _read(self, directory: str, name: str) -> bytes:
        return self.source.read(posixpath.join(directory, name))

    def _load_template(self, name: str) -> CachedTemplate:
        try:
            content = self._read(self.template_dir, name)
        except OSError as exc:
            raise TemplateNotFoundError(name) from exc

        try:
            parsed = parse_template(content)
        except MailerError as exc:
            msg = f"failed to parse template {name}: {exc}"
            raise RenderFailedError(msg, template_name=name) from exc

        template = self.body_engine.compile(parsed.body, name)
        logger.debug(
            "Template compiled and cached",
            extra={"template": name, "metadata_keys": list(parsed.metadata)},
        )
        return CachedTemplate(name=name, metadata=parsed.metadata, template=template)

    def _load_layout(self, name: str) -> Template:
        try:
            content = self._read(self.layout_dir, name)
        except OSError as exc:
            raise LayoutNotFoundError(name) from exc

        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            msg = f"layout {name} is not valid UTF-8: {exc}"
            raise RenderFailedError(msg) from exc

        layout = self.layout_engine.compile(text, name)
        logger.debug("Layout compiled and cached", extra={"layout": name})
        return layout

    def has_template(self, name: str) -> bool:
        """Check whether a template is cached, without loading it."""
        return name in self._templates

    @property
    def cached_templates(self) -> list[str]:
        """Names of templates currently cached."""
        return sorted(self._templates)

    @property
    def cached_layouts(self) -> list[str]:
        """Names of layouts currently cached."""
        return sorted(self._layouts)

    def clear(self) -> None:
        """Drop every cached template and layout.

        Intended for development reloads; production catalogs are static.
        """
        with self._lock:
            self._templates = {}
            self._layouts = {}
        logger.info("Template cache cleared")


__all__ = ["CachedTemplate", "TemplateCache"]
