"""Console sender for development.

Logs emails instead of delivering them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .base import BaseSender

if TYPE_CHECKING:
    from markmail.mail.schemas import Email

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 500


def _preview(body: str) -> list[str]:
    lines = [body[:PREVIEW_LENGTH]]
    if len(body) > PREVIEW_LENGTH:
        lines.append(f"... ({len(body) - PREVIEW_LENGTH} more characters)")
    return lines


class ConsoleSender(BaseSender):
    """Console sender for development.

    Instead of delivering, formats the email and writes it to the log.
    Always succeeds.

    Example:
        sender = ConsoleSender(default_from="noreply@example.com")
        await sender.send(email)
    """

    @property
    def sender_name(self) -> str:
        """Get sender name."""
        return "console"

    def format_email(self, email: Email) -> str:
        """Format an email for display."""
        separator = "=" * 60
        output_lines = [
            "",
            separator,
            "EMAIL (Console Sender - Development Mode)",
            separator,
            f"From: {self.resolve_from(email)}",
            f"To: {', '.join(email.to)}",
        ]

        if email.cc:
            output_lines.append(f"Cc: {', '.join(email.cc)}")
        if email.bcc:
            output_lines.append(f"Bcc: {', '.join(email.bcc)}")
        if email.reply_to:
            output_lines.append(f"Reply-To: {email.reply_to}")

        output_lines.append(f"Subject: {email.subject}")

        for name, value in email.headers.items():
            output_lines.append(f"{name}: {value}")

        if email.tags:
            tags = ", ".join(f"{name}={value}" for name, value in email.encoded_tags().items())
            output_lines.append(f"Tags: {tags}")

        if email.attachments:
            output_lines.append(f"Attachments: {', '.join(a.filename for a in email.attachments)}")

        output_lines.append(separator)

        if email.text:
            output_lines.append("TEXT BODY:")
            output_lines.extend(_preview(email.text))

        if email.html:
            output_lines.append("")
            output_lines.append("HTML BODY:")
            output_lines.extend(_preview(email.html))

        output_lines.extend([separator, ""])
        return "\n".join(output_lines)

    async def _do_send(self, email: Email) -> None:
        logger.info(self.format_email(email), extra={"email": email.summary()})


__all__ = ["ConsoleSender"]
