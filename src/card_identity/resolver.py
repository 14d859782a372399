"""Main card resolution controller."""

import logging
import time
from typing import Sequence

from card_identity.merger import merge_pair
from card_identity.models.card import (
    ConsolidatedEntity,
    RawExtraction,
    ResolutionMetadata,
    ResolutionResult,
)
from card_identity.strategies import MergeStrategy, RuleBasedStrategy

logger = logging.getLogger(__name__)


class CardResolver:
    """Main controller for consolidating extracted card records."""

    def __init__(self, strategy: MergeStrategy | None = None):
        """
        Initialize the resolver with a merge strategy.

        Args:
            strategy: Strategy used for batches; defaults to rule-based.
        """
        self._strategy = strategy or RuleBasedStrategy()

    @property
    def strategy(self) -> MergeStrategy:
        return self._strategy

    def resolve(self, records: Sequence[RawExtraction]) -> ResolutionResult:
        """
        Consolidate a batch of extractions into entities.

        Args:
            records: Extractions in upload order.

        Returns:
            ResolutionResult with the entities and run metadata.
        """
        start_time = time.perf_counter()

        entities = self._strategy.merge(records)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        metadata = ResolutionMetadata(
            strategy=self._strategy.name,
            input_count=len(records),
            output_count=len(entities),
            processing_time_ms=round(elapsed_ms, 2),
        )
        logger.debug(
            "Resolved %d records into %d entities with %s in %.2fms",
            metadata.input_count,
            metadata.output_count,
            metadata.strategy,
            metadata.processing_time_ms,
        )

        return ResolutionResult(entities=entities, metadata=metadata)

    def resolve_pair(self, front: RawExtraction, back: RawExtraction | None = None) -> ConsolidatedEntity:
        """
        Consolidate a single card uploaded as front and optional back.

        The two sides are combined without matching, since the uploader
        already declared them the same card.

        Args:
            front: Extraction of the front side.
            back: Extraction of the back side, if photographed.

        Returns:
            Entity for the card.
        """
        if back is None:
            return ConsolidatedEntity.from_record(front)
        return merge_pair(front, back)
