"""Transactional email from markdown templates.

This package composes emails from markdown templates with YAML frontmatter
and hands them to a pluggable sender:
- Frontmatter metadata (conventional ``Subject`` key)
- Jinja2 variable substitution in bodies and subjects
- ``[!button|Label](URL)`` styled links
- HTML layouts wrapping the rendered markdown
- Thread-safe caching of compiled templates and layouts

Basic Usage:
    from markmail import FileSystemSource, Mailer, Renderer, SendParams
    from markmail.mail.providers import ConsoleSender

    renderer = Renderer(FileSystemSource("emails"))
    mailer = Mailer(ConsoleSender(), renderer)

    await mailer.send(SendParams(
        to="user@example.com",
        template="welcome.md",
        data={"Name": "John", "URL": "https://example.com/start"},
    ))

Template (emails/welcome.md):
    ---
    Subject: Welcome {{ Name }}!
    ---
    # Welcome

    Hello {{ Name }}, welcome to our service!

    [!button|Get Started]({{ URL }})
"""

from __future__ import annotations

from .core.exceptions import (
    EmailValidationError,
    FrontmatterError,
    LayoutNotFoundError,
    MailerError,
    NoContentError,
    NoRecipientError,
    NoSubjectError,
    RenderFailedError,
    SendFailedError,
    TemplateNotFoundError,
)
from .core.settings import MailerSettings, get_mailer_settings
from .mail import (
    Attachment,
    Email,
    Mailer,
    SendParams,
    Sender,
    TagPresent,
    TagValue,
    format_recipient,
    simple_tags,
    value_tags,
)
from .templating import (
    FileSystemSource,
    MemorySource,
    Renderer,
    RenderResult,
    parse_template,
)

__version__ = "0.1.0"

__all__ = [
    "Attachment",
    "Email",
    "EmailValidationError",
    "FileSystemSource",
    "FrontmatterError",
    "LayoutNotFoundError",
    "Mailer",
    "MailerError",
    "MailerSettings",
    "MemorySource",
    "NoContentError",
    "NoRecipientError",
    "NoSubjectError",
    "RenderFailedError",
    "RenderResult",
    "Renderer",
    "SendFailedError",
    "SendParams",
    "Sender",
    "TagPresent",
    "TagValue",
    "TemplateNotFoundError",
    "__version__",
    "format_recipient",
    "get_mailer_settings",
    "parse_template",
    "simple_tags",
    "value_tags",
]
