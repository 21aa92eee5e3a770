"""YAML frontmatter parsing for markdown templates.

A template may start with a metadata block bounded by ``---`` lines:

    ---
    Subject: Welcome {{ Name }}!
    ---
    # Hello {{ Name }}

Only the first two delimiter lines bound the block. A ``---`` line further
down (a thematic break, or one inside a fenced code sample) belongs to the
body and is never parsed as metadata.

Metadata is frozen all the way down: nested mappings become frozendicts,
sequences become tuples and sets become frozensets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from frozendict import deepfreeze, frozendict
import yaml

from markmail.core.exceptions import FrontmatterError

DELIMITER = "---"


@dataclass(frozen=True)
class ParsedTemplate:
    """A template split into its frontmatter metadata and markdown body."""

    body: str
    metadata: frozendict[str, Any] = field(default_factory=frozendict)


def _next_line(text: str, start: int) -> tuple[str, int]:
    """Return the line beginning at ``start`` and the offset of the following line."""
    end = text.find("\n", start)
    if end == -1:
        return text[start:], len(text)
    return text[start:end], end + 1


def _is_delimiter(line: str) -> bool:
    return line.removesuffix("\r") == DELIMITER


def _decode(content: bytes | str) -> str:
    if isinstance(content, str):
        return content.removeprefix("\ufeff")
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        msg = f"template is not valid UTF-8: {exc}"
        raise FrontmatterError(msg) from exc


def _load_metadata(block: str) -> frozendict[str, Any]:
    if not block.strip():
        return frozendict()

    try:
        metadata = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        msg = f"invalid frontmatter: {exc}"
        raise FrontmatterError(msg) from exc

    if metadata is None:
        return frozendict()
    if not isinstance(metadata, dict):
        msg = f"invalid frontmatter: expected a mapping, got {type(metadata).__name__}"
        raise FrontmatterError(msg)
    return deepfreeze(metadata)


def parse_template(content: bytes | str) -> ParsedTemplate:
    """Split raw template content into metadata and body.

    Args:
        content: Raw template bytes (UTF-8) or text.

    Returns:
        ParsedTemplate with the decoded metadata and the remaining body.
        Content without a leading ``---`` line is returned unchanged as
        the body with empty metadata.

    Raises:
        FrontmatterError: If the block is unterminated, is not valid YAML,
            does not decode to a mapping, or the bytes are not UTF-8.
    """
    text = _decode(content)

    first_line, block_start = _next_line(text, 0)
    if not _is_delimiter(first_line):
        return ParsedTemplate(body=text)

    position = block_start
    while position < len(text):
        line, next_position = _next_line(text, position)
        if _is_delimiter(line):
            metadata = _load_metadata(text[block_start:position])
            return ParsedTemplate(body=text[next_position:], metadata=metadata)
        position = next_position

    msg = "invalid frontmatter: closing delimiter not found"
    raise FrontmatterError(msg)


__all__ = ["DELIMITER", "ParsedTemplate", "parse_template"]
