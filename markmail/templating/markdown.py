"""Markdown to HTML conversion with pluggable inline rules.

Custom syntax is added as :class:`InlineRule` entries: a trigger character,
a parse function and a render function. Rules are installed in order into a
single markdown-it-py instance, ahead of the built-in ``link`` rule, and the
resulting converter is shared by every render call.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any

from markdown_it import MarkdownIt

if TYPE_CHECKING:
    from markdown_it.rules_inline import StateInline
    from markdown_it.token import Token

logger = logging.getLogger(__name__)

ParseFunc = Callable[["StateInline", bool], bool]
RenderFunc = Callable[[Any, Sequence["Token"], int, Any, Any], str]


@dataclass(frozen=True)
class InlineRule:
    """A custom inline syntax rule.

    Attributes:
        name: Token type emitted by ``parse`` and handled by ``render``.
        trigger: Character that must sit at the cursor for ``parse`` to run.
        parse: markdown-it inline rule. Returns False without touching the
            state when the input does not match.
        render: markdown-it render rule for tokens of type ``name``.
    """

    name: str
    trigger: str
    parse: ParseFunc
    render: RenderFunc

    def matches(self, state: StateInline) -> bool:
        return state.src.startswith(self.trigger, state.pos)


def install_rules(md: MarkdownIt, rules: Iterable[InlineRule], *, before: str = "link") -> MarkdownIt:
    """Register inline rules into a markdown-it instance, preserving order.

    Args:
        md: Parser to extend.
        rules: Rules to install; earlier rules run first.
        before: Built-in inline rule the custom rules are placed ahead of.

    Returns:
        The same parser, for chaining.
    """
    for rule in rules:

        def _guarded(state: StateInline, silent: bool, rule: InlineRule = rule) -> bool:
            if not rule.matches(state):
                return False
            return rule.parse(state, silent)

        md.inline.ruler.before(before, rule.name, _guarded)
        md.add_render_rule(rule.name, rule.render)
        logger.debug("Installed inline markdown rule", extra={"rule": rule.name, "before": before})
    return md


class MarkdownConverter:
    """CommonMark converter configured once with custom inline rules.

    Raw HTML in the markdown source is escaped rather than passed through.
    The converter holds no per-call state and is safe to share between
    threads.

    Example:
        converter = MarkdownConverter()
        converter.convert("[!button|Verify](https://example.com/verify)")
    """

    def __init__(self, rules: Iterable[InlineRule] | None = None) -> None:
        if rules is None:
            from .buttons import BUTTON_RULE

            rules = (BUTTON_RULE,)
        self._rules = tuple(rules)
        self._md = install_rules(MarkdownIt("commonmark", {"html": False}), self._rules)

    @property
    def rules(self) -> tuple[InlineRule, ...]:
        """Installed custom rules, in pipeline order."""
        return self._rules

    def convert(self, text: str) -> str:
        """Convert markdown text to an HTML fragment."""
        return self._md.render(text)


__all__ = ["InlineRule", "MarkdownConverter", "install_rules"]
