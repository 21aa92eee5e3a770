"""Exceptions raised by the mailer.

Every failure surfaces as a subclass of :class:`MailerError`. Wrapping errors
chain their cause with ``raise ... from exc`` so callers can inspect the
original error while still catching a specific category.
"""

from __future__ import annotations


class MailerError(Exception):
    """Base exception for mailer errors."""

    def __init__(self, message: str, *, template_name: str | None = None) -> None:
        self.message = message
        self.template_name = template_name
        super().__init__(message)

    def caused_by(self, exc_type: type[BaseException]) -> bool:
        """Check whether this error or anything in its cause chain is ``exc_type``.

        Args:
            exc_type: Exception class to look for.

        Returns:
            True if the error itself or a chained cause is an instance of exc_type.
        """
        current: BaseException | None = self
        seen: set[int] = set()
        while current is not None and id(current) not in seen:
            if isinstance(current, exc_type):
                return True
            seen.add(id(current))
            current = current.__cause__
        return False


class EmailValidationError(MailerError):
    """Raised when an email is missing a required field."""


class NoRecipientError(EmailValidationError):
    """Raised when an email has no recipient."""

    def __init__(self) -> None:
        super().__init__("email must have at least one recipient")


class NoSubjectError(EmailValidationError):
    """Raised when an email has no subject."""

    def __init__(self) -> None:
        super().__init__("email must have a subject")


class NoContentError(EmailValidationError):
    """Raised when an email has no HTML content."""

    def __init__(self) -> None:
        super().__init__("email must have HTML content")


class TemplateNotFoundError(MailerError):
    """Raised when a template source cannot be read."""

    def __init__(self, template_name: str) -> None:
        super().__init__(f"template not found: {template_name}", template_name=template_name)


class LayoutNotFoundError(MailerError):
    """Raised when a layout source cannot be read."""

    def __init__(self, layout_name: str) -> None:
        self.layout_name = layout_name
        super().__init__(f"layout not found: {layout_name}")


class FrontmatterError(MailerError):
    """Raised when a template's frontmatter block is malformed."""


class RenderFailedError(MailerError):
    """Raised when substitution, markdown conversion or layout execution fails."""


class SendFailedError(MailerError):
    """Raised when the sender fails to deliver an email."""

    def __init__(self, message: str, *, sender: str | None = None) -> None:
        self.sender = sender
        super().__init__(message)


__all__ = [
    "EmailValidationError",
    "FrontmatterError",
    "LayoutNotFoundError",
    "MailerError",
    "NoContentError",
    "NoRecipientError",
    "NoSubjectError",
    "RenderFailedError",
    "SendFailedError",
    "TemplateNotFoundError",
]
