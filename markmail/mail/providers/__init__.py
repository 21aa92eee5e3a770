"""Email senders.

The mailer depends only on the :class:`Sender` protocol. Console and file
senders are included for development and tests; production transports are
supplied by the application and registered with :func:`register_sender`.
"""

from .base import BaseSender, Sender
from .console import ConsoleSender
from .factory import create_sender, list_senders, register_sender
from .file import FileSender

__all__ = [
    "BaseSender",
    "ConsoleSender",
    "FileSender",
    "Sender",
    "create_sender",
    "list_senders",
    "register_sender",
]
