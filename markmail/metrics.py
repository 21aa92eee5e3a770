"""Prometheus metrics for rendering and delivery.

Usage:
    from markmail.metrics import email_send_total

    email_send_total.labels(sender="console", status="success").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Rendering Metrics
# =============================================================================

template_cache_lookups_total = Counter(
    "markmail_template_cache_lookups_total",
    "Template and layout cache lookups",
    labelnames=["kind", "result"],
)
"""
Counter for cache lookups.

Labels:
    kind: template or layout
    result: hit, miss or error
"""

email_render_total = Counter(
    "markmail_email_render_total",
    "Total number of template renders",
    labelnames=["template", "status"],
)
"""
Counter for render attempts.

Labels:
    template: Name of a template that loaded into the cache, or "unknown"
        for lookups that never did (missing or unparsable templates)
    status: success or failed
"""

email_render_duration_seconds = Histogram(
    "markmail_email_render_duration_seconds",
    "Template render duration in seconds",
    labelnames=["template"],
    buckets=[0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0],
)
"""
Histogram of full render time (substitution, markdown conversion and layout).

Buckets are tuned for in-process rendering: cached templates land in the
low millisecond range, first renders include source reads and compilation.
"""

# =============================================================================
# Delivery Metrics
# =============================================================================

email_send_total = Counter(
    "markmail_email_send_total",
    "Total number of email send attempts",
    labelnames=["sender", "status"],
)
"""
Counter for send attempts.

Labels:
    sender: Sender name (console, file, ...)
    status: success, failed, render_failed or invalid
"""

email_send_duration_seconds = Histogram(
    "markmail_email_send_duration_seconds",
    "Email delivery duration in seconds",
    labelnames=["sender"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

email_recipients_total = Counter(
    "markmail_email_recipients_total",
    "Total number of recipients handed to a sender",
    labelnames=["sender"],
)


__all__ = [
    "email_recipients_total",
    "email_render_duration_seconds",
    "email_render_total",
    "email_send_duration_seconds",
    "email_send_total",
    "template_cache_lookups_total",
]
