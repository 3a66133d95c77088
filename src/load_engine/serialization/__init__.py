"""Serialization between platform documents and engine models."""

from load_engine.serialization.documents import (
    PROFILE_DEFAULTS,
    apply_load_state,
    block_from_document,
    block_to_document,
    document_id,
    load_state_from_document,
    pmc_to_documents,
    session_from_document,
    session_to_document,
    thresholds_from_document,
    training_from_document,
    training_to_document,
    zone_system_from_document,
)

__all__ = [
    "PROFILE_DEFAULTS",
    "apply_load_state",
    "block_from_document",
    "block_to_document",
    "document_id",
    "load_state_from_document",
    "pmc_to_documents",
    "session_from_document",
    "session_to_document",
    "thresholds_from_document",
    "training_from_document",
    "training_to_document",
    "zone_system_from_document",
]
