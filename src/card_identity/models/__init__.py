"""Data models for card identity resolution."""

from card_identity.models.card import (
    RawExtraction,
    Fingerprint,
    ConsolidatedEntity,
    MatchScore,
    ResolutionMetadata,
    ResolutionResult,
)

__all__ = [
    "RawExtraction",
    "Fingerprint",
    "ConsolidatedEntity",
    "MatchScore",
    "ResolutionMetadata",
    "ResolutionResult",
]
