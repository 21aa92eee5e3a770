"""Pytest configuration and shared fixtures.

Organization:
    - Source Fixtures: in-memory template catalogs and read-counting sources
    - Rendering Fixtures: renderer and settings
    - Delivery Fixtures: mock senders
"""

from __future__ import annotations

from collections import Counter
import threading
import time
from unittest.mock import AsyncMock

import pytest

from markmail.core.settings import MailerSettings
from markmail.templating.renderer import Renderer
from markmail.templating.sources import MemorySource, normalize_path

WELCOME_TEMPLATE = """---
Subject: Welcome {{ Name }}!
Category: onboarding
---
# Hello {{ Name }}

Thanks for joining.

[!button|Get Started]({{ URL }})
"""

PLAIN_TEMPLATE = "Hi {{ Name }}, this template has no frontmatter.\n"

BASE_LAYOUT = "<html><body>{{ Content }}</body></html>"

META_LAYOUT = "<html><head><title>{{ Metadata.Category }}</title></head><body>{{ Content }}</body></html>"


# ============================================================================
# Source Fixtures
# ============================================================================


class CountingSource:
    """Template source that records how often each path is read.

    Optionally sleeps inside ``read`` to widen race windows in concurrency
    tests.
    """

    def __init__(self, files: dict[str, bytes | str], delay: float = 0.0) -> None:
        self._inner = MemorySource(files)
        self._delay = delay
        self._lock = threading.Lock()
        self.reads: Counter[str] = Counter()

    def read(self, path: str) -> bytes:
        with self._lock:
            self.reads[normalize_path(path)] += 1
        if self._delay:
            time.sleep(self._delay)
        return self._inner.read(path)


@pytest.fixture
def template_files() -> dict[str, str]:
    """Default template catalog used by most rendering tests."""
    return {
        "welcome.md": WELCOME_TEMPLATE,
        "plain.md": PLAIN_TEMPLATE,
        "layouts/base.html": BASE_LAYOUT,
        "layouts/meta.html": META_LAYOUT,
    }


@pytest.fixture
def counting_source(template_files: dict[str, str]) -> CountingSource:
    """Read-counting source over the default catalog."""
    return CountingSource(template_files)


# ============================================================================
# Rendering Fixtures
# ============================================================================


@pytest.fixture
def renderer(counting_source: CountingSource) -> Renderer:
    """Renderer backed by the counting source."""
    return Renderer(counting_source)


@pytest.fixture
def settings() -> MailerSettings:
    """Mailer settings with explicit defaults."""
    return MailerSettings(
        fallback_subject="Notification",
        default_layout="base.html",
        from_email="team@example.com",
        from_name="Team",
    )


# ============================================================================
# Delivery Fixtures
# ============================================================================


@pytest.fixture
def mock_sender() -> AsyncMock:
    """Sender whose send coroutine records every email."""
    sender = AsyncMock()
    sender.send = AsyncMock(return_value=None)
    sender.sender_name = "mock"
    return sender


@pytest.fixture
def make_counting_source():
    """Factory building read-counting sources over arbitrary catalogs.

    Example:
        def test_x(make_counting_source):
            source = make_counting_source({"a.md": "Hi"}, delay=0.01)
    """

    def _make(files: dict[str, bytes | str], delay: float = 0.0) -> CountingSource:
        return CountingSource(files, delay=delay)

    return _make
