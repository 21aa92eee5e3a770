"""Tests for template sources."""

from __future__ import annotations

from pathlib import Path

import pytest

from markmail.templating.sources import (
    FileSystemSource,
    MemorySource,
    TemplateSource,
    normalize_path,
)


class TestNormalizePath:
    """Tests for source path normalization."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("welcome.md", "welcome.md"),
            ("./welcome.md", "welcome.md"),
            ("layouts/../welcome.md", "welcome.md"),
            ("layouts//base.html", "layouts/base.html"),
            ("layouts\\base.html", "layouts/base.html"),
        ],
    )
    def test_normalizes(self, path: str, expected: str) -> None:
        assert normalize_path(path) == expected

    @pytest.mark.parametrize("path", ["/etc/passwd", "../secret.md", "layouts/../../secret.md", ".."])
    def test_rejects_escaping_paths(self, path: str) -> None:
        with pytest.raises(FileNotFoundError, match="escapes template root"):
            normalize_path(path)


class TestMemorySource:
    """Tests for the in-memory source."""

    def test_reads_str_and_bytes(self) -> None:
        source = MemorySource({"a.md": "Grüße", "b.md": b"\x00raw"})

        assert source.read("a.md") == "Grüße".encode()
        assert source.read("b.md") == b"\x00raw"

    def test_paths_are_normalized(self) -> None:
        source = MemorySource({"./layouts/base.html": "<html></html>"})

        assert source.read("layouts/base.html") == b"<html></html>"
        assert source.read("layouts/./base.html") == b"<html></html>"
        assert "layouts/base.html" in source

    def test_missing_entry(self) -> None:
        source = MemorySource({})

        with pytest.raises(FileNotFoundError, match="no such template: missing.md"):
            source.read("missing.md")

        assert "missing.md" not in source

    def test_is_a_template_source(self) -> None:
        assert isinstance(MemorySource({}), TemplateSource)


class TestFileSystemSource:
    """Tests for the directory-backed source."""

    def test_reads_nested_file(self, tmp_path: Path) -> None:
        (tmp_path / "layouts").mkdir()
        (tmp_path / "layouts" / "base.html").write_bytes(b"<html>{{ Content }}</html>")

        source = FileSystemSource(tmp_path)

        assert source.read("layouts/base.html") == b"<html>{{ Content }}</html>"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            FileSystemSource(tmp_path).read("missing.md")

    def test_directory_is_not_a_template(self, tmp_path: Path) -> None:
        (tmp_path / "layouts").mkdir()

        with pytest.raises(FileNotFoundError):
            FileSystemSource(tmp_path).read("layouts")

    def test_cannot_escape_root(self, tmp_path: Path) -> None:
        root = tmp_path / "emails"
        root.mkdir()
        (tmp_path / "secret.md").write_text("secret")

        with pytest.raises(FileNotFoundError):
            FileSystemSource(root).read("../secret.md")

    def test_is_a_template_source(self, tmp_path: Path) -> None:
        assert isinstance(FileSystemSource(tmp_path), TemplateSource)
