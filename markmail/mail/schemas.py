"""Email schemas and data models.

Defines the outgoing email, its attachments and tags.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

TagScalar = str | int | float | bool


@dataclass(frozen=True)
class TagPresent:
    """Presence-only tag: the tag name alone carries the meaning."""


@dataclass(frozen=True)
class TagValue:
    """Key-value tag carrying a scalar value."""

    value: TagScalar


Tag = TagPresent | TagValue

PRESENT = TagPresent()


def simple_tags(*names: str) -> dict[str, Tag]:
    """Create presence-only tags from tag names.

    Example:
        email = Email(..., tags=simple_tags("welcome", "onboarding"))
    """
    return dict.fromkeys(names, PRESENT)


def value_tags(**values: TagScalar) -> dict[str, Tag]:
    """Create key-value tags from keyword arguments."""
    return {name: TagValue(value) for name, value in values.items()}


def tag_value(tag: Tag) -> str:
    """Encode a tag as a string for providers that only accept name/value pairs.

    Presence-only tags become ``"true"``.
    """
    match tag:
        case TagPresent():
            return "true"
        case TagValue(value=bool() as flag):
            return "true" if flag else "false"
        case TagValue(value=value):
            return str(value)
    msg = f"unsupported tag: {tag!r}"
    raise TypeError(msg)


def format_recipient(name: str, email: str) -> str:
    """Format a name and address as ``Name <email>``, or just the address without a name."""
    if not name:
        return email
    return f"{name} <{email}>"


class Attachment(BaseModel):
    """Email attachment model.

    Example:
        attachment = Attachment(
            filename="data.csv",
            content=b"col1,col2\\n1,2\\n",
            content_type="text/csv",
        )
    """

    model_config = ConfigDict(frozen=True)

    filename: str = Field(
        min_length=1,
        max_length=255,
        description="Attachment filename",
    )
    content: bytes = Field(
        default=b"",
        description="Attachment content as bytes",
    )
    content_type: str = Field(
        default="application/octet-stream",
        description="MIME content type",
    )
    content_id: str | None = Field(
        default=None,
        description="Content-ID for inline attachments (e.g., images in HTML)",
    )


class Email(BaseModel):
    """A fully prepared email ready for a sender.

    Addresses may be bare (``user@example.com``) or include a display name
    (``John <user@example.com>``). Required fields are checked by the mailer
    before handoff, not by the model, so a raw email can be built freely
    and rejected with a precise error.

    Example:
        email = Email(
            to=["user@example.com"],
            subject="Welcome!",
            html="<h1>Welcome!</h1>",
            tags=simple_tags("welcome"),
        )
    """

    model_config = ConfigDict(frozen=True)

    # Recipients
    to: list[str] = Field(
        default_factory=list,
        description="Primary recipients (at least one required to send)",
    )
    cc: list[str] = Field(
        default_factory=list,
        description="CC recipients",
    )
    bcc: list[str] = Field(
        default_factory=list,
        description="BCC recipients",
    )
    reply_to: str = Field(
        default="",
        description="Reply-to address",
    )

    # Sender (uses the sender's default when empty)
    from_email: str = Field(
        default="",
        description="Sender address override",
    )

    # Content
    subject: str = Field(
        default="",
        description="Email subject line",
    )
    html: str = Field(
        default="",
        description="HTML body",
    )
    text: str = Field(
        default="",
        description="Plain text alternative",
    )

    # Metadata
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Additional email headers",
    )
    tags: dict[str, Tag] = Field(
        default_factory=dict,
        description="Provider tags/categories",
    )
    attachments: list[Attachment] = Field(
        default_factory=list,
        description="File attachments",
    )

    @property
    def all_recipients(self) -> list[str]:
        """Get all recipients (to, cc, bcc)."""
        return list(self.to) + list(self.cc) + list(self.bcc)

    def encoded_tags(self) -> dict[str, str]:
        """Get tags as name/value strings."""
        return {name: tag_value(tag) for name, tag in self.tags.items()}

    def summary(self) -> dict[str, Any]:
        """Get a log-safe summary (no bodies, no attachment content)."""
        return {
            "to": list(self.to),
            "cc_count": len(self.cc),
            "bcc_count": len(self.bcc),
            "subject": self.subject,
            "attachments": len(self.attachments),
            "tags": self.encoded_tags(),
        }


__all__ = [
    "PRESENT",
    "Attachment",
    "Email",
    "Tag",
    "TagPresent",
    "TagValue",
    "format_recipient",
    "simple_tags",
    "tag_value",
    "value_tags",
]
