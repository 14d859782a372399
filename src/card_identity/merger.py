"""Rule-based entity merging: fold each record into the first matching entity."""

import logging
from typing import Sequence

from card_identity.fingerprint import fingerprint
from card_identity.matcher import matches
from card_identity.models.card import ConsolidatedEntity, RawExtraction

logger = logging.getLogger(__name__)


def merge_all(records: Sequence[RawExtraction]) -> list[ConsolidatedEntity]:
    """
    Merge a batch of extractions into consolidated entities.

    Each record is compared, in arrival order, against the entities built
    so far and folded into the first one that is the same person or the
    other face of the same card. The scan stops at that first match; there
    is no search for a better one and no transitive closure, so a record
    that only links two existing entities does not join them.

    Args:
        records: Extractions in upload order.

    Returns:
        Entities in the order they were first seen.
    """
    entities: list[ConsolidatedEntity] = []

    for record in records:
        fp = fingerprint(record)

        for entity in entities:
            if matches(fp, fingerprint(entity)):
                logger.debug("Folding %s into entity from %s", record.filename, entity.filenames)
                entity.absorb(record)
                break
        else:
            entities.append(ConsolidatedEntity.from_record(record))

    logger.info("Card merge complete: %d records -> %d entities", len(records), len(entities))
    return entities


def merge_pair(front: RawExtraction, back: RawExtraction) -> ConsolidatedEntity:
    """Combine an explicitly uploaded front and back into one entity."""
    entity = ConsolidatedEntity.from_record(front)
    entity.absorb(back)
    return entity
