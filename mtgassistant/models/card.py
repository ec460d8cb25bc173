from dataclasses import dataclass
from enum import IntEnum


class Rarity(IntEnum):
    """Card rarity using the numeric codes found in the Arena data files."""

    NONE = 0
    LAND = 1
    COMMON = 2
    UNCOMMON = 3
    RARE = 4
    MYTHIC = 5


# Rarities that have a wildcard counterpart, in ascending order
WILDCARD_RARITIES: tuple[Rarity, ...] = (
    Rarity.COMMON,
    Rarity.UNCOMMON,
    Rarity.RARE,
    Rarity.MYTHIC,
)


@dataclass(frozen=True, slots=True)
class Card:
    """
    Card metadata resolved from the Arena data files.

    Attributes:
        id: Arena's internal card ID (grpId in the logs)
        name: English card name
        set_code: Set code as used by Arena (e.g., "M21", "ZNR")
        collector_number: Collector number within set
        rarity: Card rarity
        is_primary_card: True for the canonical printing, False for
            alternate arts and reprints sharing a name
    """

    id: int
    name: str
    set_code: str
    collector_number: str
    rarity: Rarity
    is_primary_card: bool = True


UNKNOWN_SET = "???"


def unknown_card(card_id: int) -> Card:
    """Placeholder rendered for card IDs missing from the card index."""
    return Card(
        id=card_id,
        name=f"Unknown Card {card_id}",
        set_code=UNKNOWN_SET,
        collector_number="0",
        rarity=Rarity.NONE,
        is_primary_card=False,
    )
