"""Collaborator contracts for the property catalog and user directory.

The marketplace owns listings and accounts; the negotiation engine only
needs to look them up.  In-memory implementations back the tests and local
runs, and can be seeded from a JSON fixture file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

import structlog

from appointments.domain.models import PropertyRecord, UserRecord

logger = structlog.get_logger()


class PropertyCatalog(Protocol):
    """Read-only view of the marketplace's listings."""

    def get_property(self, property_id: str) -> PropertyRecord | None:
        """Return the listing with *property_id*, or ``None``."""
        ...


class UserDirectory(Protocol):
    """Read-only view of the marketplace's accounts and roles."""

    def get_user(self, user_id: str) -> UserRecord | None:
        """Return the user with *user_id*, or ``None``."""
        ...


class InMemoryPropertyCatalog:
    """Dict-backed :class:`PropertyCatalog`."""

    def __init__(self, properties: list[PropertyRecord] | None = None) -> None:
        self._properties: dict[str, PropertyRecord] = {p.id: p for p in properties or []}

    def add(self, record: PropertyRecord) -> None:
        self._properties[record.id] = record

    def get_property(self, property_id: str) -> PropertyRecord | None:
        return self._properties.get(property_id)


class InMemoryUserDirectory:
    """Dict-backed :class:`UserDirectory`."""

    def __init__(self, users: list[UserRecord] | None = None) -> None:
        self._users: dict[str, UserRecord] = {u.id: u for u in users or []}

    def add(self, record: UserRecord) -> None:
        self._users[record.id] = record

    def get_user(self, user_id: str) -> UserRecord | None:
        return self._users.get(user_id)


def load_directory_fixture(
    path: Path,
) -> tuple[InMemoryPropertyCatalog, InMemoryUserDirectory]:
    """Build in-memory collaborators from a JSON file.

    The file holds ``{"properties": [...], "users": [...]}`` where each
    entry matches :class:`PropertyRecord` / :class:`UserRecord`.

    Args:
        path: Path to the fixture file.

    Returns:
        A ``(catalog, directory)`` tuple.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    properties = [PropertyRecord.model_validate(p) for p in data.get("properties", [])]
    users = [UserRecord.model_validate(u) for u in data.get("users", [])]
    logger.info(
        "directory_fixture_loaded",
        path=str(path),
        properties=len(properties),
        users=len(users),
    )
    return InMemoryPropertyCatalog(properties), InMemoryUserDirectory(users)
