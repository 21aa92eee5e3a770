"""Button links for markdown templates.

Authors write ``[!button|Label](https://example.com)`` and get a styled
anchor instead of a plain link:

    <a href="https://example.com" class="btn">Label</a>

Label and URL are flat scans up to the next ``]`` and ``)`` on the same
line; nested brackets are not supported. Anything that does not match the
grammar is left to the regular link rule.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from html import escape
from typing import TYPE_CHECKING, Any

from .markdown import InlineRule

if TYPE_CHECKING:
    from markdown_it.rules_inline import StateInline
    from markdown_it.token import Token

BUTTON_PREFIX = "[!button|"
BUTTON_CLASS = "btn"
BUTTON_TOKEN = "button"


@dataclass(frozen=True)
class ButtonNode:
    """Raw, unescaped label and URL captured from button syntax."""

    url: str
    label: str


def scan_button(src: str, pos: int, end: int | None = None) -> tuple[ButtonNode, int] | None:
    """Match button syntax at ``pos``.

    Args:
        src: Source text.
        pos: Offset of the opening ``[``.
        end: Offset scanning must stop at (defaults to the end of ``src``).

    Returns:
        The parsed node and the offset just past the closing ``)``, or None
        when the text at ``pos`` is not a complete button.
    """
    if end is None:
        end = len(src)
    if not src.startswith(BUTTON_PREFIX, pos, end):
        return None

    line_end = src.find("\n", pos, end)
    if line_end == -1:
        line_end = end

    label_start = pos + len(BUTTON_PREFIX)
    label_end = src.find("]", label_start, line_end)
    if label_end == -1:
        return None

    if label_end + 1 >= line_end or src[label_end + 1] != "(":
        return None

    url_start = label_end + 2
    url_end = src.find(")", url_start, line_end)
    if url_end == -1:
        return None

    node = ButtonNode(url=src[url_start:url_end], label=src[label_start:label_end])
    return node, url_end + 1


def parse_button(state: StateInline, silent: bool) -> bool:
    """markdown-it inline rule for button syntax."""
    match = scan_button(state.src, state.pos, state.posMax)
    if match is None:
        return False

    node, next_pos = match
    if not silent:
        token = state.push(BUTTON_TOKEN, "a", 0)
        token.meta = {"node": node}
    state.pos = next_pos
    return True


def render_button_html(node: ButtonNode) -> str:
    """Render a button node as an escaped anchor element."""
    return (
        f'<a href="{escape(node.url, quote=True)}" class="{BUTTON_CLASS}">'
        f"{escape(node.label, quote=True)}</a>"
    )


def render_button(self: Any, tokens: Sequence[Token], idx: int, options: Any, env: Any) -> str:
    """markdown-it render rule for button tokens."""
    return render_button_html(tokens[idx].meta["node"])


BUTTON_RULE = InlineRule(
    name=BUTTON_TOKEN,
    trigger="[",
    parse=parse_button,
    render=render_button,
)


__all__ = [
    "BUTTON_CLASS",
    "BUTTON_PREFIX",
    "BUTTON_RULE",
    "ButtonNode",
    "parse_button",
    "render_button",
    "render_button_html",
    "scan_button",
]
