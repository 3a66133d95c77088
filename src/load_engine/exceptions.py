"""Exception hierarchy for the training load engine."""

from __future__ import annotations


class LoadEngineError(Exception):
    """Base exception for all load_engine errors."""


class NotFoundError(LoadEngineError):
    """A collaborator could not find the requested entity."""

    entity = "Entity"

    def __init__(self, entity_id: str, message: str | None = None) -> None:
        super().__init__(message or f"{self.entity} not found: {entity_id}")
        self.entity_id = entity_id


class AthleteNotFoundError(NotFoundError):
    """No athlete (and so no thresholds) exists for the id."""

    entity = "Athlete"


class ZoneSystemNotFoundError(NotFoundError):
    """No zone system exists for the id."""

    entity = "ZoneSystem"


class InvalidZoneSystemError(LoadEngineError):
    """A zone system violates its invariants (duplicate labels, inverted bounds)."""


class DocumentStoreError(LoadEngineError):
    """A stored document is missing required fields or is malformed."""
