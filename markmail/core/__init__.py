"""Core building blocks shared by the templating and mail packages."""

from .exceptions import (
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
from .settings import MailerSettings, get_mailer_settings

__all__ = [
    "EmailValidationError",
    "FrontmatterError",
    "LayoutNotFoundError",
    "MailerError",
    "MailerSettings",
    "NoContentError",
    "NoRecipientError",
    "NoSubjectError",
    "RenderFailedError",
    "SendFailedError",
    "TemplateNotFoundError",
    "get_mailer_settings",
]
