"""Identity resolution for OCR'd business card records."""

from card_identity.fingerprint import fingerprint
from card_identity.merger import merge_all
from card_identity.pairing import pair_cards
from card_identity.resolver import CardResolver
from card_identity.models.card import ConsolidatedEntity, RawExtraction

__version__ = "0.1.0"
__all__ = [
    "CardResolver",
    "ConsolidatedEntity",
    "RawExtraction",
    "fingerprint",
    "merge_all",
    "pair_cards",
]
