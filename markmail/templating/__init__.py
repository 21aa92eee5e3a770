"""Markdown template rendering.

Templates are markdown files with optional YAML frontmatter, expanded with
Jinja2, converted to HTML and wrapped in a layout.
"""

from .buttons import BUTTON_RULE, ButtonNode
from .cache import CachedTemplate, TemplateCache
from .frontmatter import ParsedTemplate, parse_template
from .markdown import InlineRule, MarkdownConverter, install_rules
from .renderer import Renderer, RenderResult
from .sources import FileSystemSource, MemorySource, TemplateSource
from .substitution import SubstitutionEngine, template_context

__all__ = [
    "BUTTON_RULE",
    "ButtonNode",
    "CachedTemplate",
    "FileSystemSource",
    "InlineRule",
    "MarkdownConverter",
    "MemorySource",
    "ParsedTemplate",
    "RenderResult",
    "Renderer",
    "SubstitutionEngine",
    "TemplateCache",
    "TemplateSource",
    "install_rules",
    "parse_template",
    "template_context",
]
