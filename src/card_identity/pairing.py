"""Score-based pairing: merge each record with its best-scoring partner."""

import logging
from typing import Sequence

from card_identity.config import PairingConfig
from card_identity.fingerprint import fingerprint
from card_identity.matcher import shares
from card_identity.models.card import ConsolidatedEntity, Fingerprint, MatchScore, RawExtraction

logger = logging.getLogger(__name__)

TEXT_SEPARATOR = "\n---\n"


def compute_match_score(
    a: Fingerprint, b: Fingerprint, config: PairingConfig | None = None
) -> MatchScore:
    """
    Compute the additive match score between two fingerprints.

    Args:
        a: First fingerprint.
        b: Second fingerprint.
        config: Weights and patterns; defaults to ``PairingConfig()``.

    Returns:
        MatchScore with the total and the names of the signals that fired.
    """
    config = config or PairingConfig()
    score = 0.0
    signals: list[str] = []

    # Strong identifiers
    if shares(a.emails, b.emails):
        score += config.email_weight
        signals.append("email")
    if shares(a.phones, b.phones):
        score += config.phone_weight
        signals.append("phone")
    if shares(a.websites, b.websites):
        score += config.website_weight
        signals.append("website")

    # Medium identifiers
    if shares(a.logos, b.logos):
        score += config.logo_weight
        signals.append("logo")

    # Weak identifiers
    address_matches = sum(1 for k in config.address_keywords if k in a.text and k in b.text)
    if address_matches:
        score += min(config.address_cap, address_matches * config.address_keyword_weight)
        signals.append(f"address({address_matches})")

    if (config.role_regex.search(a.text) and config.company_regex.search(b.text)) or (
        config.role_regex.search(b.text) and config.company_regex.search(a.text)
    ):
        score += config.role_company_weight
        signals.append("role+company")

    words_a = [w for w in a.text.split() if len(w) >= config.min_word_length]
    words_b = [w for w in b.text.split() if len(w) >= config.min_word_length]
    vocabulary_b = set(words_b)
    overlap = sum(1 for w in words_a if w in vocabulary_b)
    total = max(len(words_a), len(words_b))
    if overlap >= config.min_shared_words and total:
        score += min(config.text_overlap_cap, overlap / total * config.text_overlap_factor)
        signals.append(f"textOverlap({overlap}/{total})")

    return MatchScore(score=round(score, 4), signals=tuple(signals))


def has_strong_evidence(a: Fingerprint, b: Fingerprint) -> bool:
    """Whether two fingerprints share an email, phone or website."""
    return (
        shares(a.emails, b.emails)
        or shares(a.phones, b.phones)
        or shares(a.websites, b.websites)
    )


def merge_cards(a: RawExtraction, b: RawExtraction) -> ConsolidatedEntity:
    """Combine two records into one entity, always joining both texts."""
    entity = ConsolidatedEntity.from_record(a)
    entity.absorb(b, separator=TEXT_SEPARATOR, skip_contained_text=False)
    return entity


def pair_cards(
    records: Sequence[RawExtraction], config: PairingConfig | None = None
) -> list[ConsolidatedEntity]:
    """
    Greedily pair records with their best-scoring partner.

    Records are visited in index order. Each unused record is compared with
    every later unused record and the highest score (earliest on ties)
    becomes its candidate. The pair is merged when the two share a strong
    identifier, when the score reaches ``merge_threshold``, or when it
    reaches ``logo_threshold`` with a logo match. Otherwise the record is
    emitted alone. Decisions are never revisited.

    Args:
        records: Extractions in upload order.
        config: Weights and thresholds; defaults to ``PairingConfig()``.

    Returns:
        Entities in index order of their first record.
    """
    config = config or PairingConfig()
    fingerprints = [fingerprint(r) for r in records]
    used: set[int] = set()
    entities: list[ConsolidatedEntity] = []

    for i, record in enumerate(records):
        if i in used:
            continue

        best_index: int | None = None
        best = MatchScore()
        for j in range(i + 1, len(records)):
            if j in used:
                continue
            candidate = compute_match_score(fingerprints[i], fingerprints[j], config)
            if candidate.score > best.score:
                best_index, best = j, candidate

        used.add(i)

        if best_index is None:
            entities.append(ConsolidatedEntity.from_record(record))
            continue

        partner = records[best_index]
        merge_allowed = (
            has_strong_evidence(fingerprints[i], fingerprints[best_index])
            or best.score >= config.merge_threshold
            or (best.score >= config.logo_threshold and best.has_signal("logo"))
        )

        if merge_allowed:
            logger.debug(
                "Merging %s + %s (score: %.2f, signals: [%s])",
                record.filename,
                partner.filename,
                best.score,
                ", ".join(best.signals),
            )
            used.add(best_index)
            entities.append(merge_cards(record, partner))
        else:
            logger.debug(
                "Skipped merge for %s + %s (score: %.2f, signals: [%s])",
                record.filename,
                partner.filename,
                best.score,
                ", ".join(best.signals),
            )
            entities.append(ConsolidatedEntity.from_record(record))

    logger.info("Card pairing complete: %d records -> %d entities", len(records), len(entities))
    return entities
