"""Email composition and delivery."""

from .mailer import Mailer, SendParams
from .providers import BaseSender, ConsoleSender, FileSender, Sender, create_sender, register_sender
from .schemas import (
    PRESENT,
    Attachment,
    Email,
    Tag,
    TagPresent,
    TagValue,
    format_recipient,
    simple_tags,
    tag_value,
    value_tags,
)

__all__ = [
    "PRESENT",
    "Attachment",
    "BaseSender",
    "ConsoleSender",
    "Email",
    "FileSender",
    "Mailer",
    "SendParams",
    "Sender",
    "Tag",
    "TagPresent",
    "TagValue",
    "create_sender",
    "format_recipient",
    "register_sender",
    "simple_tags",
    "tag_value",
    "value_tags",
]
