"""Merge strategies: interchangeable ways of consolidating a batch."""

from abc import ABC, abstractmethod
from typing import Sequence

from card_identity.config import PairingConfig
from card_identity.merger import merge_all
from card_identity.models.card import ConsolidatedEntity, RawExtraction
from card_identity.pairing import pair_cards


class MergeStrategy(ABC):
    """Abstract base class for merge strategies."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this strategy."""
        ...

    @abstractmethod
    def merge(self, records: Sequence[RawExtraction]) -> list[ConsolidatedEntity]:
        """
        Consolidate a batch of extractions.

        Args:
            records: Extractions in upload order.

        Returns:
            Consolidated entities.
        """
        ...


class RuleBasedStrategy(MergeStrategy):
    """Boolean identity rules, first matching entity wins."""

    @property
    def name(self) -> str:
        return "rules"

    def merge(self, records: Sequence[RawExtraction]) -> list[ConsolidatedEntity]:
        return merge_all(records)


class PairingStrategy(MergeStrategy):
    """Weighted scores, best-scoring partner wins."""

    def __init__(self, config: PairingConfig | None = None):
        """
        Initialize pairing strategy.

        Args:
            config: Weights and thresholds; defaults to ``PairingConfig()``.
        """
        self._config = config or PairingConfig()

    @property
    def name(self) -> str:
        return "pairing"

    @property
    def config(self) -> PairingConfig:
        return self._config

    def merge(self, records: Sequence[RawExtraction]) -> list[ConsolidatedEntity]:
        return pair_cards(records, self._config)


STRATEGIES = ("rules", "pairing")


def create_strategy(name: str, config: PairingConfig | None = None) -> MergeStrategy:
    """Create a strategy instance from its name."""
    name = name.strip().lower()
    if name == "rules":
        return RuleBasedStrategy()
    elif name == "pairing":
        return PairingStrategy(config)
    else:
        raise ValueError(f"Unknown merge strategy: {name}. Use one of: {', '.join(STRATEGIES)}")
