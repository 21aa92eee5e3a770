"""File sender for testing.

Writes emails to JSON files in a directory.
Useful for integration testing and previewing rendered output.

Usage:
    sender = FileSender("/tmp/emails")
    await sender.send(email)  # Writes /tmp/emails/<timestamp>_<id>.json
"""

from __future__ import annotations

import base64
from datetime import UTC, datetime
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any
import uuid

from .base import BaseSender

if TYPE_CHECKING:
    from markmail.mail.schemas import Email

logger = logging.getLogger(__name__)


class FileSender(BaseSender):
    """File sender for testing.

    Each email creates a timestamped JSON file with full message details.

    File format: {timestamp}_{message_id}.json
    """

    def __init__(self, output_dir: str | Path, default_from: str = "") -> None:
        """Initialize file sender.

        Args:
            output_dir: Directory emails are written to (created on demand).
            default_from: Address used when an email has no from_email.
        """
        super().__init__(default_from)
        self.output_dir = Path(output_dir)

        logger.info(
            "File sender initialized",
            extra={"output_dir": str(self.output_dir)},
        )

    @property
    def sender_name(self) -> str:
        """Get sender name."""
        return "file"

    def serialize(self, email: Email, message_id: str) -> dict[str, Any]:
        """Serialize an email to a JSON-compatible dict."""
        return {
            "message_id": message_id,
            "timestamp": datetime.now(UTC).isoformat(),
            "sender": self.sender_name,
            # Sender
            "from": self.resolve_from(email),
            # Recipients
            "to": list(email.to),
            "cc": list(email.cc),
            "bcc": list(email.bcc),
            "reply_to": email.reply_to,
            # Content
            "subject": email.subject,
            "text": email.text,
            "html": email.html,
            # Metadata
            "headers": dict(email.headers),
            "tags": email.encoded_tags(),
            "attachments": [
                {
                    "filename": a.filename,
                    "content_type": a.content_type,
                    "content_id": a.content_id,
                    "size_bytes": len(a.content),
                    "content_base64": base64.b64encode(a.content).decode("ascii"),
                }
                for a in email.attachments
            ],
        }

    async def _do_send(self, email: Email) -> None:
        message_id = f"file-{uuid.uuid4()}"
        timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S_%f")
        filepath = self.output_dir / f"{timestamp}_{message_id}.json"

        payload = json.dumps(self.serialize(email, message_id), indent=2, default=str)

        self.output_dir.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(payload)

        logger.debug(
            "Email written to file",
            extra={
                "message_id": message_id,
                "filepath": str(filepath),
                "recipients": len(email.all_recipients),
            },
        )

    def list_emails(self, limit: int = 100) -> list[dict[str, Any]]:
        """List emails in the output directory, newest first.

        Useful for tests verifying an email was "sent".
        """
        if not self.output_dir.exists():
            return []

        emails = []
        for filepath in sorted(self.output_dir.glob("*.json"), reverse=True)[:limit]:
            with open(filepath, encoding="utf-8") as f:
                emails.append(json.load(f))
        return emails

    def clear_emails(self) -> int:
        """Delete all emails in the output directory.

        Returns:
            Number of files deleted
        """
        if not self.output_dir.exists():
            return 0

        count = 0
        for filepath in self.output_dir.glob("*.json"):
            filepath.unlink()
            count += 1
        return count


__all__ = ["FileSender"]
