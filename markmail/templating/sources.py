"""Read-only template sources.

A source maps a POSIX-style path such as ``layouts/base.html`` to raw bytes.
Missing entries raise :class:`FileNotFoundError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path, PurePosixPath
import posixpath
from typing import Protocol, runtime_checkable


@runtime_checkable
class TemplateSource(Protocol):
    """Byte lookup for templates and layouts."""

    def read(self, path: str) -> bytes:
        """Read the raw bytes stored at ``path``.

        Raises:
            FileNotFoundError: If nothing is stored at ``path``.
        """
        ...


def normalize_path(path: str) -> str:
    """Normalize a source path and reject paths escaping the source root.

    Raises:
        FileNotFoundError: If the path is absolute or climbs above the root.
    """
    normalized = posixpath.normpath(path.replace("\\", "/"))
    if PurePosixPath(normalized).is_absolute() or normalized == ".." or normalized.startswith("../"):
        msg = f"path escapes template root: {path}"
        raise FileNotFoundError(msg)
    return normalized


class FileSystemSource:
    """Template source backed by a directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def read(self, path: str) -> bytes:
        target = self.root / normalize_path(path)
        if not target.is_file():
            msg = f"no such template file: {target}"
            raise FileNotFoundError(msg)
        return target.read_bytes()

    def __repr__(self) -> str:
        return f"FileSystemSource(root={str(self.root)!r})"


class MemorySource:
    """Template source backed by an in-memory mapping.

    Useful for templates embedded in code and for tests.

    Example:
        source = MemorySource({
            "welcome.md": "---\\nSubject: Hi\\n---\\nHello {{ Name }}",
            "layouts/base.html": "<html>{{ Content }}</html>",
        })
    """

    def __init__(self, files: Mapping[str, bytes | str]) -> None:
        self._files = {
            normalize_path(name): content.encode("utf-8") if isinstance(content, str) else bytes(content)
            for name, content in files.items()
        }

    def read(self, path: str) -> bytes:
        try:
            return self._files[normalize_path(path)]
        except KeyError:
            msg = f"no such template: {path}"
            raise FileNotFoundError(msg) from None

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        try:
            return normalize_path(path) in self._files
        except FileNotFoundError:
            return False


__all__ = ["FileSystemSource", "MemorySource", "TemplateSource", "normalize_path"]
