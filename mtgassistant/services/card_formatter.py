"""
Rendering of extracted snapshots.

Cards are rendered in Arena export format:
    <count> <name> (<set>) <collector_number>

Card IDs missing from the index render as the unknown-card placeholder;
a lookup miss never aborts rendering.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, NonNegativeInt, TypeAdapter

from mtgassistant.models.card import WILDCARD_RARITIES, Card
from mtgassistant.models.snapshots import BoosterOpenEvent, CollectionSnapshot, InventorySnapshot

if TYPE_CHECKING:
    from mtgassistant.services.card_index import CardIndex


def format_card_line(count: int, card: Card) -> str:
    """Format a single card line in Arena format."""
    return f"{count} {card.name} ({card.set_code}) {card.collector_number}"


def format_collection(snapshot: CollectionSnapshot, index: CardIndex) -> list[str]:
    """One line per owned card, in the order the log listed them."""
    return [
        format_card_line(count, index.resolve(card_id))
        for card_id, count in snapshot.cards.items()
    ]


def format_inventory(snapshot: InventorySnapshot) -> list[str]:
    """Human-readable inventory counters."""
    lines = [
        f"Gold: {snapshot.gold}",
        f"Gems: {snapshot.gems}",
    ]
    for rarity in WILDCARD_RARITIES:
        lines.append(f"{rarity.name.title()} Wildcards: {snapshot.wildcards(rarity)}")
    lines.append(f"Vault Progress: {snapshot.vault_progress:g}")
    return lines


class BoosterReport(BaseModel):
    """Rendered contents of one booster, as served to clients."""

    wcc: NonNegativeInt = 0
    wcu: NonNegativeInt = 0
    wcr: NonNegativeInt = 0
    wcm: NonNegativeInt = 0
    cards: list[str] = Field(default_factory=list)


def booster_reports(events: list[BoosterOpenEvent], index: CardIndex) -> list[BoosterReport]:
    """Render booster events, one report per pack, in log order."""
    return [
        BoosterReport(
            wcc=event.common_wildcards,
            wcu=event.uncommon_wildcards,
            wcr=event.rare_wildcards,
            wcm=event.mythic_wildcards,
            cards=[format_card_line(1, index.resolve(card_id)) for card_id in event.card_ids],
        )
        for event in events
    ]


# =============================================================================
# BOOSTER EVENT SERIALIZATION
# =============================================================================


class BoosterRecord(BaseModel):
    """Serialized booster event (IDs, not rendered names)."""

    wcc: NonNegativeInt = 0
    wcu: NonNegativeInt = 0
    wcr: NonNegativeInt = 0
    wcm: NonNegativeInt = 0
    card_ids: list[NonNegativeInt] = Field(default_factory=list)


_BOOSTER_RECORDS = TypeAdapter(list[BoosterRecord])


def boosters_to_json(events: list[BoosterOpenEvent]) -> str:
    """Encode booster events to JSON, preserving card order."""
    records = [
        BoosterRecord(
            wcc=event.common_wildcards,
            wcu=event.uncommon_wildcards,
            wcr=event.rare_wildcards,
            wcm=event.mythic_wildcards,
            card_ids=list(event.card_ids),
        )
        for event in events
    ]
    return _BOOSTER_RECORDS.dump_json(records).decode("utf-8")


def boosters_from_json(data: str | bytes) -> list[BoosterOpenEvent]:
    """
    Decode booster events written by boosters_to_json.

    Raises:
        pydantic.ValidationError: If data is not a list of booster records
    """
    return [
        BoosterOpenEvent(
            card_ids=tuple(record.card_ids),
            common_wildcards=record.wcc,
            uncommon_wildcards=record.wcu,
            rare_wildcards=record.wcr,
            mythic_wildcards=record.wcm,
        )
        for record in _BOOSTER_RECORDS.validate_json(data)
    ]
