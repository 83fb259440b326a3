"""Resilience helpers for retrying transient store failures."""

from appointments.resilience.retry import call_with_retry, is_retryable

__all__ = [
    "call_with_retry",
    "is_retryable",
]
