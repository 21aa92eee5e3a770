"""High-level mailer combining rendering and delivery.

Usage:
    mailer = Mailer(sender, Renderer(FileSystemSource("emails")), settings)

    await mailer.send(SendParams(
        to="user@example.com",
        template="welcome.md",
        data={"Name": "John"},
    ))

Subject resolution: ``params.subject`` > template ``Subject`` metadata >
``settings.fallback_subject``. The chosen subject is itself a template and
is expanded against the same data as the body.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from markmail.core.exceptions import (
    MailerError,
    NoContentError,
    NoRecipientError,
    NoSubjectError,
    RenderFailedError,
    SendFailedError,
)
from markmail.core.settings import MailerSettings
from markmail.metrics import email_send_total
from markmail.templating.substitution import SubstitutionEngine

from .schemas import Attachment, Email, Tag

if TYPE_CHECKING:
    from markmail.templating.renderer import Renderer

    from .providers.base import Sender

logger = logging.getLogger(__name__)

SUBJECT_METADATA_KEY = "Subject"


class SendParams(BaseModel):
    """Parameters for sending a templated email."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    to: str = Field(description="Single recipient")
    template: str = Field(description="Template name, e.g. 'welcome.md'")
    data: Any = Field(
        default=None,
        description=(
            "Value the template and subject are executed against. Mapping keys, model or dataclass fields "
            "and public attributes become template names; other values (lists, scalars) expose no names"
        ),
    )

    # Optional overrides
    subject: str = Field(default="", description="Overrides the template subject")
    layout: str = Field(default="", description="Overrides the default layout")
    from_email: str = Field(default="", description="Overrides the sender's default from address")
    reply_to: str = Field(default="", description="Reply-to address")
    cc: list[str] = Field(default_factory=list, description="CC recipients")
    bcc: list[str] = Field(default_factory=list, description="BCC recipients")
    attachments: list[Attachment] = Field(default_factory=list, description="File attachments")
    headers: dict[str, str] = Field(default_factory=dict, description="Additional email headers")
    tags: dict[str, Tag] = Field(default_factory=dict, description="Provider tags/categories")


def _sender_name(sender: Any) -> str:
    return getattr(sender, "sender_name", type(sender).__name__)


class Mailer:
    """Renders templates and hands the finished email to a sender.

    The mailer keeps no per-call state; one instance can serve many
    concurrent sends. Nothing is retried: callers that want retries wrap
    ``send`` in their task queue.
    """

    def __init__(
        self,
        sender: Sender,
        renderer: Renderer,
        settings: MailerSettings | None = None,
    ) -> None:
        """Initialize the mailer.

        Args:
            sender: Delivery backend.
            renderer: Template renderer.
            settings: Subject and layout defaults.
        """
        self.sender = sender
        self.renderer = renderer
        self.settings = settings or MailerSettings()
        self._subject_engine = SubstitutionEngine()

    def resolve_subject(self, override: str, metadata: Any) -> str:
        """Pick the subject template for a send.

        Args:
            override: Caller-provided subject; wins when non-empty.
            metadata: Template frontmatter; its string ``Subject`` is used next.

        Returns:
            The unexpanded subject template.
        """
        if override:
            return override
        from_metadata = metadata.get(SUBJECT_METADATA_KEY) if metadata else None
        if isinstance(from_metadata, str) and from_metadata:
            return from_metadata
        return self.settings.fallback_subject

    async def send(self, params: SendParams) -> None:
        """Render a template and send the resulting email.

        Raises:
            NoRecipientError: If ``params.to`` is empty.
            RenderFailedError: If rendering or subject expansion fails.
            SendFailedError: If the sender fails.
        """
        if not params.to:
            email_send_total.labels(sender=_sender_name(self.sender), status="invalid").inc()
            raise NoRecipientError

        layout = params.layout or self.settings.default_layout

        try:
            result = self.renderer.render(layout, params.template, params.data)
            subject = self._subject_engine.render_string(
                self.resolve_subject(params.subject, result.metadata),
                params.data,
                name=f"{params.template}:subject",
            )
        except MailerError as exc:
            email_send_total.labels(sender=_sender_name(self.sender), status="render_failed").inc()
            msg = f"failed to render {params.template}: {exc}"
            raise RenderFailedError(msg, template_name=params.template) from exc

        email = Email(
            to=[params.to],
            subject=subject,
            html=result.html,
            text=result.text,
            from_email=params.from_email,
            reply_to=params.reply_to,
            cc=params.cc,
            bcc=params.bcc,
            attachments=params.attachments,
            headers=params.headers,
            tags=params.tags,
        )

        logger.info(
            "Sending templated email",
            extra={"template": params.template, "layout": layout, **email.summary()},
        )
        await self._deliver(email)

    async def send_raw(self, email: Email) -> None:
        """Send a pre-built email without rendering.

        Raises:
            NoRecipientError: If ``email.to`` is empty.
            NoSubjectError: If ``email.subject`` is empty.
            NoContentError: If ``email.html`` is empty.
            SendFailedError: If the sender fails.
        """
        try:
            if not email.to:
                raise NoRecipientError
            if not email.subject:
                raise NoSubjectError
            if not email.html:
                raise NoContentError
        except MailerError:
            email_send_total.labels(sender=_sender_name(self.sender), status="invalid").inc()
            raise

        await self._deliver(email)

    async def _deliver(self, email: Email) -> None:
        try:
            await self.sender.send(email)
        except Exception as exc:
            name = _sender_name(self.sender)
            msg = f"failed to send email via {name}: {exc}"
            raise SendFailedError(msg, sender=name) from exc


__all__ = ["Mailer", "SendParams"]
