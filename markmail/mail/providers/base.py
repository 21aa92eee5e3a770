"""Sender protocol and base class.

Defines the contract delivery backends implement. A sender receives a fully
prepared, immutable :class:`~markmail.mail.schemas.Email` and either returns
normally or raises.

Senders are coroutines: callers bound delivery time with
``asyncio.timeout(...)`` or cancel the task; there is no separate
cancellation argument.

Usage:
    class MySender(BaseSender):
        @property
        def sender_name(self) -> str:
            return "mine"

        async def _do_send(self, email: Email) -> None:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
import time
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from markmail.metrics import (
    email_recipients_total,
    email_send_duration_seconds,
    email_send_total,
)

if TYPE_CHECKING:
    from markmail.mail.schemas import Email

logger = logging.getLogger(__name__)


@runtime_checkable
class Sender(Protocol):
    """Protocol defining the delivery interface.

    Using Protocol allows duck typing and easier testing: any object with a
    matching ``send`` coroutine can be handed to the mailer.
    """

    async def send(self, email: Email) -> None:
        """Deliver an email.

        The email has recipients, subject and HTML already set.

        Raises:
            Exception: Any exception signals delivery failure.
        """
        ...


class BaseSender(ABC):
    """Abstract base class for senders.

    Provides common functionality for all senders:
    - Timing measurement
    - Logging
    - Metrics

    Subclasses must implement:
    - _do_send(): Actual delivery logic
    - sender_name property
    """

    def __init__(self, default_from: str = "") -> None:
        """Initialize the sender.

        Args:
            default_from: Address used when an email has no from_email.
        """
        self.default_from = default_from

    @property
    @abstractmethod
    def sender_name(self) -> str:
        """Get the sender name (e.g., 'console', 'file')."""
        ...

    @abstractmethod
    async def _do_send(self, email: Email) -> None:
        """Implement the actual delivery logic."""
        ...

    def resolve_from(self, email: Email) -> str:
        """Get the effective from address for an email."""
        return email.from_email or self.default_from

    async def send(self, email: Email) -> None:
        """Send an email with timing, logging and metrics.

        Exceptions from _do_send() propagate to the caller unchanged.
        """
        start_time = time.perf_counter()

        try:
            await self._do_send(email)
        except Exception as e:
            duration = time.perf_counter() - start_time
            email_send_total.labels(sender=self.sender_name, status="failed").inc()
            logger.warning(
                f"Email send failed via {self.sender_name}",
                extra={
                    "sender": self.sender_name,
                    "error": str(e),
                    "duration_ms": int(duration * 1000),
                },
            )
            raise

        duration = time.perf_counter() - start_time
        email_send_total.labels(sender=self.sender_name, status="success").inc()
        email_send_duration_seconds.labels(sender=self.sender_name).observe(duration)
        email_recipients_total.labels(sender=self.sender_name).inc(len(email.all_recipients))
        logger.info(
            f"Email sent via {self.sender_name}",
            extra={
                "sender": self.sender_name,
                "recipients": len(email.all_recipients),
                "duration_ms": int(duration * 1000),
            },
        )


__all__ = ["BaseSender", "Sender"]
