"""Variable substitution for template bodies, subjects and layouts.

Templates are Jinja2 sources executed in an immutable sandbox with
``StrictUndefined``: referencing a field the data does not have is an error,
never an empty string, and templates cannot modify lists, dicts or sets
passed to them.

The data value may be a mapping, a dataclass, a pydantic model or any other
object; its keys, fields or attributes become the template's top-level
names, so ``{{ Name }}`` reads ``data["Name"]`` or ``data.Name``.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
from typing import Any

from jinja2 import StrictUndefined, Template, TemplateError
from jinja2.sandbox import ImmutableSandboxedEnvironment
from pydantic import BaseModel

from markmail.core.exceptions import RenderFailedError


def _slot_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if not name.startswith("_") and name not in names:
                names.append(name)
    return names


def template_context(data: Any) -> dict[str, Any]:
    """Build the top-level template namespace for a data value.

    Mappings expose their keys, dataclasses and pydantic models their fields,
    other objects their public attributes (``__dict__`` or ``__slots__``).
    Values with none of these, such as lists and scalars, are accepted with
    an empty namespace: templates that reference no fields still render.

    Args:
        data: Any value, or None.

    Returns:
        Dictionary of names visible to the template.
    """
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return {str(key): value for key, value in data.items()}
    if isinstance(data, BaseModel):
        return {name: getattr(data, name) for name in type(data).model_fields}
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return {f.name: getattr(data, f.name) for f in dataclasses.fields(data)}

    context: dict[str, Any] = {}
    for name in _slot_names(type(data)):
        if hasattr(data, name):
            context[name] = getattr(data, name)
    if hasattr(data, "__dict__"):
        context.update((name, value) for name, value in vars(data).items() if not name.startswith("_"))
    return context


class SubstitutionEngine:
    """Immutable sandboxed Jinja2 environment for compiling and executing templates.

    Example:
        engine = SubstitutionEngine()
        engine.render_string("Welcome {{ Name }}!", {"Name": "John"})
    """

    def __init__(self, *, autoescape: bool = False) -> None:
        """Initialize the engine.

        Args:
            autoescape: HTML-escape substituted values. Enabled for layouts,
                disabled for markdown bodies and subjects.
        """
        self.autoescape = autoescape
        self._env = ImmutableSandboxedEnvironment(
            autoescape=autoescape,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def compile(self, source: str, name: str | None = None) -> Template:
        """Compile a template source.

        Raises:
            RenderFailedError: If the source has a syntax error.
        """
        try:
            return self._env.from_string(source)
        except TemplateError as exc:
            msg = f"failed to parse template {name or '<string>'}: {exc}"
            raise RenderFailedError(msg, template_name=name) from exc

    def execute(self, template: Template, data: Any, name: str | None = None) -> str:
        """Execute a compiled template against a data value.

        Raises:
            RenderFailedError: If a field is undefined or execution fails.
        """
        context = template_context(data)
        try:
            return template.render(context)
        except Exception as exc:
            msg = f"failed to execute template {name or '<string>'}: {exc}"
            raise RenderFailedError(msg, template_name=name) from exc

    def render_string(self, source: str, data: Any, name: str | None = None) -> str:
        """Compile and execute a template in one step."""
        return self.execute(self.compile(source, name), data, name)


__all__ = ["SubstitutionEngine", "template_context"]
