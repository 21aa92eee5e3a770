"""Sender factory.

Maps the ``MAILER_SENDER`` setting to a sender class. Applications plug in
real transports by registering them under a new name.

Usage:
    register_sender("resend", lambda settings: ResendSender(...))
    sender = create_sender(get_mailer_settings())
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import TYPE_CHECKING

from .console import ConsoleSender
from .file import FileSender

if TYPE_CHECKING:
    from markmail.core.settings import MailerSettings

    from .base import Sender

logger = logging.getLogger(__name__)

SenderBuilder = Callable[["MailerSettings"], "Sender"]

_registry: dict[str, SenderBuilder] = {
    "console": lambda settings: ConsoleSender(default_from=settings.default_sender),
    "file": lambda settings: FileSender(settings.file_path, default_from=settings.default_sender),
}


def register_sender(name: str, builder: SenderBuilder) -> None:
    """Register a sender builder under ``name``."""
    if name in _registry:
        logger.warning(f"Overwriting existing sender registration: {name}")
    _registry[name] = builder
    logger.debug(f"Registered sender: {name}")


def list_senders() -> list[str]:
    """List registered sender names."""
    return sorted(_registry)


def create_sender(settings: MailerSettings, name: str | None = None) -> Sender:
    """Create the sender selected by settings (or by ``name``).

    Raises:
        ValueError: If no sender is registered under the name.
    """
    sender_name = name or settings.sender
    builder = _registry.get(sender_name)
    if builder is None:
        msg = f"Unknown sender: {sender_name}. Available: {', '.join(list_senders())}"
        raise ValueError(msg)
    return builder(settings)


__all__ = ["create_sender", "list_senders", "register_sender"]
