"""Command line entry point for previewing and sending templated emails."""

import asyncio
from collections.abc import Callable
import json
import logging
import sys
from typing import Any

import click

from markmail import __version__
from markmail.cli.formatters import details, error, json_default, section, success
from markmail.core.exceptions import MailerError
from markmail.core.settings import MailerSettings
from markmail.mail.mailer import Mailer, SendParams
from markmail.mail.providers import create_sender, list_senders
from markmail.templating.renderer import Renderer


def _load_data(data: str | None, data_file: str | None) -> Any:
    if data and data_file:
        msg = "use either --data or --data-file, not both"
        raise click.UsageError(msg)
    try:
        if data_file:
            with open(data_file, encoding="utf-8") as f:
                return json.load(f)
        if data:
            return json.loads(data)
    except json.JSONDecodeError as e:
        msg = f"template data is not valid JSON: {e}"
        raise click.BadParameter(msg) from e
    return {}


data_options = [
    click.option("--data", "-d", help="Template data as a JSON object"),
    click.option(
        "--data-file",
        type=click.Path(exists=True, dir_okay=False),
        help="Read template data from a JSON file",
    ),
    click.option("--layout", "-l", default="", help="Layout name (defaults to MAILER_DEFAULT_LAYOUT)"),
]


def with_data_options(f: Callable[..., Any]) -> Callable[..., Any]:
    for option in reversed(data_options):
        f = option(f)
    return f


@click.group()
@click.version_option(version=__version__, prog_name="markmail")
@click.option("--root", "-r", help="Directory templates and layouts are read from")
@click.option("--template-dir", help="Template directory, relative to the root")
@click.option("--layout-dir", help="Layout directory, relative to the root")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    root: str | None,
    template_dir: str | None,
    layout_dir: str | None,
    verbose: bool,
) -> None:
    """markmail - render and send markdown email templates.

    \b
    Quick Start:
      markmail --root emails render welcome.md -d '{"Name": "John"}'
      markmail --root emails send welcome.md --to user@example.com
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)

    overrides = {
        key: value
        for key, value in {
            "template_root": root,
            "template_dir": template_dir,
            "layout_dir": layout_dir,
        }.items()
        if value is not None
    }
    ctx.ensure_object(dict)
    ctx.obj["settings"] = MailerSettings(**overrides)


@cli.command(name="render")
@click.argument("template")
@with_data_options
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["html", "text", "json"]),
    default="html",
    help="What to print",
)
@click.pass_context
def render(
    ctx: click.Context,
    template: str,
    data: str | None,
    data_file: str | None,
    layout: str,
    output_format: str,
) -> None:
    """Render TEMPLATE and print the result.

    Examples:
    \b
      markmail render welcome.md --data '{"Name": "John"}'
      markmail render welcome.md --format text
    """
    settings: MailerSettings = ctx.obj["settings"]
    renderer = Renderer.from_settings(settings)

    try:
        result = renderer.render(layout or settings.default_layout, template, _load_data(data, data_file))
    except MailerError as e:
        error(str(e))
        sys.exit(1)

    if output_format == "text":
        click.echo(result.text)
    elif output_format == "json":
        click.echo(
            json.dumps(
                {"metadata": dict(result.metadata), "text": result.text, "html": result.html},
                indent=2,
                default=json_default,
            ),
        )
    else:
        click.echo(result.html)


@cli.command(name="send")
@click.argument("template")
@click.option("--to", "-t", "recipient", required=True, help="Recipient email address")
@click.option("--subject", "-s", default="", help="Override the template subject")
@click.option(
    "--sender",
    "sender_name",
    type=click.Choice(list_senders()),
    help="Sender backend (defaults to MAILER_SENDER)",
)
@with_data_options
@click.pass_context
def send(
    ctx: click.Context,
    template: str,
    recipient: str,
    subject: str,
    sender_name: str | None,
    data: str | None,
    data_file: str | None,
    layout: str,
) -> None:
    """Render TEMPLATE and send it through the configured sender.

    Examples:
    \b
      markmail send welcome.md --to user@example.com --data '{"Name": "John"}'
      markmail send welcome.md --to user@example.com --sender file
    """
    settings: MailerSettings = ctx.obj["settings"]
    sender = create_sender(settings, sender_name)
    mailer = Mailer(sender, Renderer.from_settings(settings), settings)

    section(f"Sending {template}")
    details(
        {
            "Recipient": recipient,
            "Sender": getattr(sender, "sender_name", type(sender).__name__),
            "Layout": layout or settings.default_layout,
            "Subject": subject,
        },
    )

    try:
        asyncio.run(
            mailer.send(
                SendParams(
                    to=recipient,
                    template=template,
                    data=_load_data(data, data_file),
                    subject=subject,
                    layout=layout,
                ),
            ),
        )
    except MailerError as e:
        error(str(e))
        sys.exit(1)

    success(f"Email sent to {recipient}")


if __name__ == "__main__":
    cli()
