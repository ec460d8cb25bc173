"""
Game state extracted from the Arena client log.

Snapshots restate the full value of some counter set (collection,
inventory) and are superseded by later dumps of the same kind.
Booster openings are events: each one is a distinct fact and none
supersedes another.

All models are frozen (immutable after construction).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from mtgassistant.models.card import Rarity


class EventKind(str, Enum):
    """Closed set of log events the scanner recognizes."""

    COLLECTION = "collection"
    INVENTORY = "inventory"
    BOOSTER_OPEN = "booster_open"
    DECK_LISTS = "deck_lists"


def _frozen_mapping(value: Mapping[Any, Any]) -> Mapping[Any, Any]:
    return MappingProxyType(dict(value))


@dataclass(frozen=True, slots=True)
class CollectionSnapshot:
    """
    Full card collection at one point in the log.

    Attributes:
        cards: Card ID -> owned copies, in the order the log listed them
    """

    cards: Mapping[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cards", _frozen_mapping(self.cards))

    def get_quantity(self, card_id: int) -> int:
        """Get quantity owned of a specific card."""
        return self.cards.get(card_id, 0)

    def total_cards(self) -> int:
        """Total number of cards in collection."""
        return sum(self.cards.values())

    def unique_cards(self) -> int:
        """Number of unique cards in collection."""
        return len(self.cards)


# Inventory keys used by the Arena client for wildcard counters
INVENTORY_WILDCARD_KEYS: dict[Rarity, str] = {
    Rarity.COMMON: "wcCommon",
    Rarity.UNCOMMON: "wcUncommon",
    Rarity.RARE: "wcRare",
    Rarity.MYTHIC: "wcMythic",
}


@dataclass(frozen=True, slots=True)
class InventorySnapshot:
    """
    Player resource counters at one point in the log.

    The counter set is defined by the game client and kept opaque;
    accessors cover the counters this package renders.
    """

    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", _frozen_mapping(self.values))

    def _counter(self, key: str) -> int:
        value = self.values.get(key, 0)
        if isinstance(value, bool) or not isinstance(value, int | float):
            return 0
        return int(value)

    @property
    def gold(self) -> int:
        return self._counter("gold")

    @property
    def gems(self) -> int:
        return self._counter("gems")

    @property
    def vault_progress(self) -> float:
        value = self.values.get("vaultProgress", 0)
        return float(value) if isinstance(value, int | float) else 0.0

    def wildcards(self, rarity: Rarity) -> int:
        """Wildcards owned of the given rarity (0 for non-wildcard rarities)."""
        key = INVENTORY_WILDCARD_KEYS.get(rarity)
        if key is None:
            return 0
        return self._counter(key)


@dataclass(frozen=True, slots=True)
class BoosterOpenEvent:
    """
    Contents of one opened booster pack.

    Attributes:
        card_ids: Card IDs in the order they were drawn (duplicates allowed)
        common_wildcards: Common wildcards awarded by this opening
        uncommon_wildcards: Uncommon wildcards awarded by this opening
        rare_wildcards: Rare wildcards awarded by this opening
        mythic_wildcards: Mythic wildcards awarded by this opening
    """

    card_ids: tuple[int, ...] = ()
    common_wildcards: int = 0
    uncommon_wildcards: int = 0
    rare_wildcards: int = 0
    mythic_wildcards: int = 0

    def wildcards(self, rarity: Rarity) -> int:
        """Wildcards awarded of the given rarity."""
        return {
            Rarity.COMMON: self.common_wildcards,
            Rarity.UNCOMMON: self.uncommon_wildcards,
            Rarity.RARE: self.rare_wildcards,
            Rarity.MYTHIC: self.mythic_wildcards,
        }.get(rarity, 0)


@dataclass(frozen=True, slots=True)
class DeckList:
    """A saved deck: main deck card ID -> count."""

    deck_id: str
    name: str
    cards: Mapping[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cards", _frozen_mapping(self.cards))


@dataclass(frozen=True, slots=True)
class DeckListsSnapshot:
    """All decks from one deck-lists dump."""

    decks: tuple[DeckList, ...] = ()


Snapshot = CollectionSnapshot | InventorySnapshot | BoosterOpenEvent | DeckListsSnapshot
