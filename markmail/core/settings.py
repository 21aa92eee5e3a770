"""Mailer settings.

Environment variables use the MAILER_ prefix.
Example: MAILER_FALLBACK_SUBJECT="Hello", MAILER_DEFAULT_LAYOUT=base.html
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from tempfile import gettempdir
from typing import Literal

from pydantic import EmailStr, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_EMAIL_FILE_DIR = Path(gettempdir()) / "markmail_emails"


class MailerSettings(BaseSettings):
    """Mailer configuration.

    Controls subject/layout defaults, where templates and layouts are read
    from, and which development sender is used.
    """

    # Rendering defaults
    fallback_subject: str = Field(
        default="Notification",
        description="Subject used when neither the caller nor the template provides one",
    )
    default_layout: str = Field(
        default="base.html",
        min_length=1,
        description="Layout used when the caller does not override it",
    )

    # Template sources
    template_root: str = Field(
        default=".",
        description="Filesystem directory templates and layouts are resolved against",
    )
    template_dir: str = Field(
        default=".",
        description="Template directory, relative to template_root",
    )
    layout_dir: str = Field(
        default="layouts",
        description="Layout directory, relative to template_root",
    )

    # Sender configuration
    sender: Literal["console", "file"] = Field(
        default="console",
        description="Sender backend: console (dev) or file (testing)",
    )
    from_email: EmailStr = Field(
        default="noreply@example.com",
        description="Default sender email address",
    )
    from_name: str = Field(
        default="",
        max_length=100,
        description="Default sender display name",
    )
    file_path: str = Field(
        default=str(DEFAULT_EMAIL_FILE_DIR),
        description="Directory the file sender writes emails to",
    )

    model_config = SettingsConfigDict(
        env_prefix="MAILER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def default_sender(self) -> str:
        """Get the formatted default sender address."""
        if self.from_name:
            return f"{self.from_name} <{self.from_email}>"
        return str(self.from_email)


@lru_cache(maxsize=1)
def get_mailer_settings() -> MailerSettings:
    """Get cached mailer settings."""
    return MailerSettings()
