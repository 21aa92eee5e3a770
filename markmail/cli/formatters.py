"""Output helpers for the markmail commands.

Rendered output goes to stdout so it can be piped; status lines go to
stderr, except the final success line.
"""

from collections.abc import Mapping
from typing import Any

import click


def success(message: str) -> None:
    """Print a success message in green."""
    click.secho(f"✓ {message}", fg="green")


def error(message: str) -> None:
    """Print an error message in red."""
    click.secho(f"✗ {message}", fg="red", err=True)


def section(title: str) -> None:
    """Print a bold heading for a send."""
    click.secho(title, bold=True, err=True)
    click.secho("-" * len(title), dim=True, err=True)


def details(fields: Mapping[str, Any]) -> None:
    """Print aligned ``name: value`` lines, skipping empty values.

    Example:
        details({"Recipient": "user@example.com", "Sender": "file"})
    """
    rows = {name: value for name, value in fields.items() if value not in (None, "")}
    if not rows:
        return
    width = max(len(name) for name in rows)
    for name, value in rows.items():
        click.echo(f"  {click.style(name.ljust(width), fg='blue')}  {value}", err=True)


def json_default(value: Any) -> Any:
    """``json.dumps`` fallback for frozen frontmatter values."""
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, frozenset | set):
        return sorted(value, key=str)
    return str(value)
