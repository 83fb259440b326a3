"""Domain enumerations for the appointment negotiation engine."""

from enum import StrEnum


class InquiryKind(StrEnum):
    """Kinds of inquiry a buyer can send about a listing."""

    MESSAGE = "message"
    APPOINTMENT = "appointment"


class InquiryStatus(StrEnum):
    """States in the appointment negotiation lifecycle."""

    PENDING = "pending"
    PROPOSED = "proposed"
    BUYER_ACCEPTED = "buyer_accepted"
    BUYER_REJECTED = "buyer_rejected"
    SELLER_REJECTED = "seller_rejected"


class ActorRole(StrEnum):
    """Which side of the negotiation is acting."""

    BUYER = "buyer"
    SELLER = "seller"


class UserRole(StrEnum):
    """Marketplace roles as reported by the user directory."""

    BUYER = "buyer"
    SELLER = "seller"
    ADMIN = "admin"


class PropertyStatus(StrEnum):
    """Moderation state of a listing in the property catalog."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
