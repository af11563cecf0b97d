"""Exception hierarchy for the template service.

All exceptions inherit from TemplateAPIError so callers can catch
service-level errors with a single except clause.
"""

from __future__ import annotations

from typing import Any


class TemplateAPIError(Exception):
    """Base exception for all template service errors."""

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class AuthenticationError(TemplateAPIError):
    """Raised when credentials are missing or do not match."""


class EntityNotFoundError(TemplateAPIError):
    """Raised when a persisted entity does not exist."""

    def __init__(
        self,
        message: str = "",
        *,
        entity: str = "",
        entity_id: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message, details=details)


class ServiceUnavailableError(TemplateAPIError):
    """Raised when a backing service cannot be reached."""
