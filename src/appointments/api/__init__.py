"""HTTP surface for inquiry submission and appointment negotiation."""

from appointments.api.errors import register_error_handlers
from appointments.api.routes import router

__all__ = [
    "register_error_handlers",
    "router",
]
