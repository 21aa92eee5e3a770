"""Markdown email rendering.

Turns a markdown template with optional YAML frontmatter into the HTML and
plain-text parts of an email:

1. Execute the template body against the data; the result is the text part.
2. Convert that markdown to an HTML fragment.
3. Execute the layout with ``Content`` (the fragment, not re-escaped) and
   ``Metadata`` (the template frontmatter); the result is the HTML part.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time
from typing import TYPE_CHECKING, Any

from markupsafe import Markup

from markmail.core.exceptions import MailerError, RenderFailedError
from markmail.metrics import email_render_duration_seconds, email_render_total

from .cache import TemplateCache
from .markdown import MarkdownConverter
from .sources import FileSystemSource

if TYPE_CHECKING:
    from collections.abc import Mapping

    from markmail.core.settings import MailerSettings

    from .sources import TemplateSource

logger = logging.getLogger(__name__)

UNKNOWN_TEMPLATE_LABEL = "unknown"


@dataclass(frozen=True)
class RenderResult:
    """Rendered HTML, plain text and the template's frontmatter metadata."""

    html: str
    text: str
    metadata: Mapping[str, Any] = field(default_factory=dict)


class Renderer:
    """Renders markdown templates into layouts.

    Compiled templates and layouts are cached; rendered output never is.
    A single renderer is safe to share between threads.

    Example:
        renderer = Renderer(FileSystemSource("emails"))
        result = renderer.render("base.html", "welcome.md", {"Name": "John"})
        result.html      # full HTML document
        result.text      # markdown after substitution
        result.metadata  # {"Subject": "Welcome {{ Name }}!"}
    """

    def __init__(
        self,
        source: TemplateSource,
        *,
        template_dir: str = ".",
        layout_dir: str = "layouts",
        converter: MarkdownConverter | None = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            source: Where templates and layouts are read from.
            template_dir: Template directory within the source.
            layout_dir: Layout directory within the source.
            converter: Markdown converter; defaults to one with button support.
        """
        self.cache = TemplateCache(source, template_dir=template_dir, layout_dir=layout_dir)
        self.converter = converter or MarkdownConverter()

    @classmethod
    def from_settings(cls, settings: MailerSettings) -> Renderer:
        """Create a filesystem-backed renderer from mailer settings."""
        return cls(
            FileSystemSource(settings.template_root),
            template_dir=settings.template_dir,
            layout_dir=settings.layout_dir,
        )

    def render(self, layout: str, template_name: str, data: Any = None) -> RenderResult:
        """Render a template inside a layout.

        Args:
            layout: Layout name, relative to the layout directory.
            template_name: Template name, relative to the template directory.
            data: Value the template and subject are executed against.

        Returns:
            RenderResult with html, text and metadata.

        Raises:
            TemplateNotFoundError: If the template does not exist.
            LayoutNotFoundError: If the layout does not exist.
            RenderFailedError: If parsing, substitution, conversion or layout
                execution fails.
        """
        start_time = time.perf_counter()
        try:
            result = self._render(layout, template_name, data)
        except MailerError:
            email_render_total.labels(template=self._template_label(template_name), status="failed").inc()
            logger.debug(
                "Template render failed",
                extra={"template": template_name, "layout": layout},
                exc_info=True,
            )
            raise

        duration = time.perf_counter() - start_time
        email_render_total.labels(template=template_name, status="success").inc()
        email_render_duration_seconds.labels(template=template_name).observe(duration)
        return result

    def _template_label(self, template_name: str) -> str:
        if self.cache.has_template(template_name):
            return template_name
        return UNKNOWN_TEMPLATE_LABEL

    def _render(self, layout: str, template_name: str, data: Any) -> RenderResult:
        cached = self.cache.get_template(template_name)
        text = self.cache.body_engine.execute(cached.template, data, template_name)

        try:
            content = self.converter.convert(text)
        except Exception as exc:
            msg = f"failed to convert markdown for {template_name}: {exc}"
            raise RenderFailedError(msg, template_name=template_name) from exc

        layout_template = self.cache.get_layout(layout)
        envelope = {
            "Content": Markup(content),
            "Metadata": cached.metadata,
        }
        html = self.cache.layout_engine.execute(layout_template, envelope, layout)

        return RenderResult(html=html, text=text, metadata=cached.metadata)


__all__ = ["RenderResult", "Renderer"]
