"""Sentry error reporting, fed from structlog.

Sentry stays off unless ``SENTRY_DSN`` is configured.  Once on, ERROR-level
structlog events are forwarded through ``structlog-sentry``; the stdlib
logging integration is disabled so events are not reported twice.
"""

from __future__ import annotations

import logging

import sentry_sdk
import structlog
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog_sentry import SentryProcessor

TRACES_SAMPLE_RATE = 0.1


def init_sentry(dsn: str, environment: str = "development") -> bool:
    """Initialize the Sentry SDK if *dsn* is set.

    Returns:
        ``True`` when Sentry was initialized, ``False`` when *dsn* is empty.
    """
    if not dsn:
        return False

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=TRACES_SAMPLE_RATE,
        # Buyer messages, notes and emails stay out of error reports.
        send_default_pii=False,
        integrations=[LoggingIntegration(event_level=None, level=None)],
    )
    return True


def get_sentry_processor() -> structlog.types.Processor:
    """Structlog processor forwarding ERROR events; place it before the renderer."""
    return SentryProcessor(event_level=logging.ERROR)
