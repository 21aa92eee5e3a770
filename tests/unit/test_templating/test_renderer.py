"""Tests for the markdown email renderer."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from prometheus_client import REGISTRY
import pytest

from markmail.core.exceptions import (
    LayoutNotFoundError,
    RenderFailedError,
    TemplateNotFoundError,
)
from markmail.core.settings import MailerSettings
from markmail.templating.markdown import MarkdownConverter
from markmail.templating.renderer import UNKNOWN_TEMPLATE_LABEL, Renderer
from markmail.templating.sources import MemorySource

WELCOME_DATA = {"Name": "John", "URL": "https://example.com/start"}

WELCOME_CONTENT = (
    "<h1>Hello John</h1>\n"
    "<p>Thanks for joining.</p>\n"
    '<p><a href="https://example.com/start" class="btn">Get Started</a></p>\n'
)


class TestRender:
    """Tests for a single render."""

    def test_full_render(self, renderer: Renderer) -> None:
        result = renderer.render("base.html", "welcome.md", WELCOME_DATA)

        assert result.html == f"<html><body>{WELCOME_CONTENT}</body></html>"
        assert result.text == (
            "# Hello John\n\nThanks for joining.\n\n[!button|Get Started](https://example.com/start)\n"
        )
        assert dict(result.metadata) == {"Subject": "Welcome {{ Name }}!", "Category": "onboarding"}

    def test_text_is_markdown_after_substitution(self, renderer: Renderer) -> None:
        result = renderer.render("base.html", "plain.md", {"Name": "Ada"})

        assert result.text == "Hi Ada, this template has no frontmatter.\n"
        assert result.html == "<html><body><p>Hi Ada, this template has no frontmatter.</p>\n</body></html>"

    def test_template_without_frontmatter_has_empty_metadata(self, renderer: Renderer) -> None:
        result = renderer.render("base.html", "plain.md", {"Name": "Ada"})

        assert dict(result.metadata) == {}

    def test_layout_reads_metadata(self, renderer: Renderer) -> None:
        result = renderer.render("meta.html", "welcome.md", WELCOME_DATA)

        assert result.html.startswith("<html><head><title>onboarding</title></head><body><h1>")

    def test_content_is_not_escaped_twice(self, renderer: Renderer) -> None:
        result = renderer.render("base.html", "welcome.md", {"Name": "Tom & Jerry", "URL": "/x?a=1&b=2"})

        assert "<h1>Hello Tom &amp; Jerry</h1>" in result.html
        assert 'href="/x?a=1&amp;b=2"' in result.html
        assert "&amp;amp;" not in result.html

    def test_html_in_data_is_escaped_by_markdown(self, renderer: Renderer) -> None:
        result = renderer.render("base.html", "plain.md", {"Name": "<script>x</script>"})

        assert "<script>" not in result.html
        assert result.text == "Hi <script>x</script>, this template has no frontmatter.\n"

    def test_later_delimiter_blocks_stay_in_body(self) -> None:
        source = MemorySource(
            {
                "notes.md": "---\nSubject: Notes\n---\nBefore\n\n---\nSubject: Inner\n---\n",
                "layouts/base.html": "{{ Content }}",
            },
        )

        result = Renderer(source).render("base.html", "notes.md")

        assert dict(result.metadata) == {"Subject": "Notes"}
        assert "Subject: Inner" in result.text
        assert "Subject: Inner" in result.html

    def test_custom_directories(self) -> None:
        source = MemorySource(
            {
                "emails/hello.md": "Hello {{ Name }}",
                "emails/layouts/wrap.html": "<div>{{ Content }}</div>",
            },
        )
        renderer = Renderer(source, template_dir="emails", layout_dir="emails/layouts")

        result = renderer.render("wrap.html", "hello.md", {"Name": "Ada"})

        assert result.html == "<div><p>Hello Ada</p>\n</div>"

    def test_custom_converter(self, counting_source) -> None:
        converter = MarkdownConverter(rules=())
        renderer = Renderer(counting_source, converter=converter)

        result = renderer.render("base.html", "welcome.md", WELCOME_DATA)

        assert renderer.converter is converter
        assert 'class="btn"' not in result.html


class TestRenderErrors:
    """Tests for render failures."""

    def test_missing_template(self, renderer: Renderer) -> None:
        with pytest.raises(TemplateNotFoundError, match="missing.md"):
            renderer.render("base.html", "missing.md", {})

    def test_missing_layout(self, renderer: Renderer) -> None:
        with pytest.raises(LayoutNotFoundError, match="missing.html"):
            renderer.render("missing.html", "welcome.md", WELCOME_DATA)

    def test_unknown_field(self, renderer: Renderer) -> None:
        with pytest.raises(RenderFailedError) as exc_info:
            renderer.render("base.html", "welcome.md", {"Name": "John"})

        assert exc_info.value.template_name == "welcome.md"

    def test_layout_with_unknown_field(self) -> None:
        source = MemorySource({"a.md": "Hi", "layouts/bad.html": "{{ Content }}{{ Footer }}"})

        with pytest.raises(RenderFailedError):
            Renderer(source).render("bad.html", "a.md")

    def test_converter_failure_is_wrapped(self, counting_source) -> None:
        class BrokenConverter:
            def convert(self, text: str) -> str:
                msg = "boom"
                raise RuntimeError(msg)

        renderer = Renderer(counting_source, converter=BrokenConverter())

        with pytest.raises(RenderFailedError, match="failed to convert markdown") as exc_info:
            renderer.render("base.html", "plain.md", {"Name": "Ada"})

        assert exc_info.value.caused_by(RuntimeError)


class TestCaching:
    """Tests for compile-once behavior across renders."""

    def test_sources_are_read_once(self, renderer: Renderer, counting_source) -> None:
        renderer.render("base.html", "welcome.md", WELCOME_DATA)
        renderer.render("base.html", "welcome.md", {"Name": "Jane", "URL": "/jane"})

        assert counting_source.reads["welcome.md"] == 1
        assert counting_source.reads["layouts/base.html"] == 1

    def test_output_is_not_cached(self, renderer: Renderer) -> None:
        first = renderer.render("base.html", "plain.md", {"Name": "A"})
        second = renderer.render("base.html", "plain.md", {"Name": "B"})

        assert "Hi A" in first.html
        assert "Hi B" in second.html

    def test_concurrent_renders(self, template_files, make_counting_source) -> None:
        source = make_counting_source(template_files, delay=0.01)
        renderer = Renderer(source)

        def render(i: int) -> str:
            data = {"Name": f"User{i}", "URL": f"https://example.com/{i}"}
            return renderer.render("base.html", "welcome.md", data).html

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(render, range(100)))

        for i, html in enumerate(results):
            assert f"<h1>Hello User{i}</h1>" in html
            assert f'href="https://example.com/{i}"' in html
        assert source.reads["welcome.md"] == 1
        assert source.reads["layouts/base.html"] == 1


class TestFromSettings:
    """Tests for building a renderer from settings."""

    def test_reads_from_template_root(self, tmp_path: Path) -> None:
        (tmp_path / "layouts").mkdir()
        (tmp_path / "hello.md").write_text("---\nSubject: Hi\n---\nHello {{ Name }}\n")
        (tmp_path / "layouts" / "base.html").write_text("<main>{{ Content }}</main>")

        renderer = Renderer.from_settings(MailerSettings(template_root=str(tmp_path)))
        result = renderer.render("base.html", "hello.md", {"Name": "Ada"})

        assert result.html == "<main><p>Hello Ada</p>\n</main>"
        assert result.metadata["Subject"] == "Hi"


class TestSharedMetadata:
    """Cached frontmatter is shared by every render and must stay unchanged."""

    @pytest.fixture
    def tagged_renderer(self) -> Renderer:
        source = MemorySource(
            {
                "tagged.md": "---\nTags: [a]\nOptions:\n  color: blue\n---\nHi\n",
                "layouts/tags.html": "{{ Metadata.Tags | join(',') }}|{{ Metadata.Options.color }}",
                "layouts/append.html": "{{ Metadata.Tags.append('x') }}{{ Metadata.Tags | length }}",
                "layouts/update.html": "{{ Metadata.Options.update(color='red') }}",
            },
        )
        return Renderer(source)

    def test_caller_cannot_change_cached_metadata(self, tagged_renderer: Renderer) -> None:
        first = tagged_renderer.render("tags.html", "tagged.md")

        with pytest.raises(AttributeError):
            first.metadata["Tags"].append("injected")
        with pytest.raises(TypeError):
            first.metadata["Options"]["color"] = "red"

        second = tagged_renderer.render("tags.html", "tagged.md")
        assert second.metadata["Tags"] == ("a",)
        assert second.html == "a|blue"

    @pytest.mark.parametrize("layout", ["append.html", "update.html"])
    def test_layout_cannot_change_cached_metadata(self, tagged_renderer: Renderer, layout: str) -> None:
        for _ in range(2):
            with pytest.raises(RenderFailedError):
                tagged_renderer.render(layout, "tagged.md")

        assert tagged_renderer.render("tags.html", "tagged.md").html == "a|blue"


class TestRenderMetrics:
    """Render metrics only carry names of templates that loaded."""

    @staticmethod
    def _renders(template: str, status: str) -> float:
        value = REGISTRY.get_sample_value(
            "markmail_email_render_total",
            {"template": template, "status": status},
        )
        return value or 0.0

    def test_missing_template_uses_unknown_label(self, renderer: Renderer) -> None:
        before = self._renders(UNKNOWN_TEMPLATE_LABEL, "failed")

        for i in range(3):
            with pytest.raises(TemplateNotFoundError):
                renderer.render("base.html", f"no-such-template-{i}.md")

        assert self._renders(UNKNOWN_TEMPLATE_LABEL, "failed") == before + 3
        assert REGISTRY.get_sample_value(
            "markmail_email_render_total",
            {"template": "no-such-template-0.md", "status": "failed"},
        ) is None

    def test_failure_of_loaded_template_keeps_its_name(self, renderer: Renderer) -> None:
        before = self._renders("welcome.md", "failed")

        with pytest.raises(RenderFailedError):
            renderer.render("base.html", "welcome.md", {"Name": "John"})

        assert self._renders("welcome.md", "failed") == before + 1

    def test_success_is_labelled_by_template(self, renderer: Renderer) -> None:
        before = self._renders("plain.md", "success")

        renderer.render("base.html", "plain.md", {"Name": "Ada"})

        assert self._renders("plain.md", "success") == before + 1
