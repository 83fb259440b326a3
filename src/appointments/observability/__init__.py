"""Observability: request context middleware, Prometheus metrics, Sentry."""
