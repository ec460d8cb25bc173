"""
Decoders from raw log payloads to typed snapshots.

One decoder per EventKind. Payload shapes are defined by the Arena client,
so each is described by a pydantic model that ignores unknown fields:
the client may add fields without breaking extraction, while a missing
required field or a wrong type rejects that one occurrence.
"""

import json
from collections.abc import Callable
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, ValidationError

from mtgassistant.models.snapshots import (
    BoosterOpenEvent,
    CollectionSnapshot,
    DeckList,
    DeckListsSnapshot,
    EventKind,
    InventorySnapshot,
    Snapshot,
)
from mtgassistant.parsers.log_scanner import LogEvent, find_json_start


class DecodeError(Exception):
    """Raised when one payload is not valid JSON or has the wrong shape."""

    def __init__(self, kind: EventKind, reason: str) -> None:
        self.kind = kind
        self.reason = reason
        super().__init__(f"Cannot decode {kind.value} payload: {reason}")


# =============================================================================
# PAYLOAD SHAPES
# =============================================================================


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class _CardsEnvelope(_Payload):
    payload: dict[int, NonNegativeInt]


class _InventoryEnvelope(_Payload):
    payload: dict[str, object]


class _OpenedCard(_Payload):
    grp_id: NonNegativeInt = Field(alias="grpId")


class _CrackedBoosters(_Payload):
    cards_opened: list[_OpenedCard] = Field(alias="cardsOpened")
    common_wildcards: NonNegativeInt = Field(default=0, alias="wildCardTrackCommons")
    uncommon_wildcards: NonNegativeInt = Field(default=0, alias="wildCardTrackUnCommons")
    rare_wildcards: NonNegativeInt = Field(default=0, alias="wildCardTrackRares")
    mythic_wildcards: NonNegativeInt = Field(default=0, alias="wildCardTrackMythics")


class _BoosterEnvelope(_Payload):
    payload: _CrackedBoosters


class _Deck(_Payload):
    id: str
    name: str
    # Flat list alternating card ID and count
    main_deck: list[NonNegativeInt] = Field(alias="mainDeck")


class _DeckListsEnvelope(_Payload):
    payload: list[_Deck]


M = TypeVar("M", bound=BaseModel)


def _validate(model: type[M], kind: EventKind, payload: str) -> M:
    try:
        return model.model_validate_json(payload)
    except ValidationError as e:
        errors = e.errors()
        first = errors[0] if errors else {"loc": (), "msg": str(e)}
        location = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise DecodeError(kind, f"{location}: {first['msg']}") from e


# =============================================================================
# DECODERS
# =============================================================================


def decode_collection(payload: str) -> CollectionSnapshot:
    """Decode a GetPlayerCardsV3 response: card ID -> owned count."""
    envelope = _validate(_CardsEnvelope, EventKind.COLLECTION, payload)
    return CollectionSnapshot(cards=envelope.payload)


def decode_inventory(payload: str) -> InventorySnapshot:
    """Decode a GetPlayerInventory response. Counters are kept opaque."""
    envelope = _validate(_InventoryEnvelope, EventKind.INVENTORY, payload)
    return InventorySnapshot(values=envelope.payload)


def decode_booster_open(payload: str) -> BoosterOpenEvent:
    """Decode a CrackBoostersV3 response into one booster event."""
    opened = _validate(_BoosterEnvelope, EventKind.BOOSTER_OPEN, payload).payload
    return BoosterOpenEvent(
        card_ids=tuple(card.grp_id for card in opened.cards_opened),
        common_wildcards=opened.common_wildcards,
        uncommon_wildcards=opened.uncommon_wildcards,
        rare_wildcards=opened.rare_wildcards,
        mythic_wildcards=opened.mythic_wildcards,
    )


def decode_deck_lists(payload: str) -> DeckListsSnapshot:
    """
    Decode a GetDeckListsV3 response.

    The payload region runs to the next marker, so only the first JSON
    value in it is decoded; trailing log lines are ignored.
    """
    start = find_json_start(payload)
    if start < 0:
        raise DecodeError(EventKind.DECK_LISTS, "no JSON value in payload")
    try:
        value, _ = json.JSONDecoder().raw_decode(payload, start)
    except json.JSONDecodeError as e:
        raise DecodeError(EventKind.DECK_LISTS, str(e)) from e

    envelope = _validate(_DeckListsEnvelope, EventKind.DECK_LISTS, json.dumps(value))

    decks: list[DeckList] = []
    for deck in envelope.payload:
        if len(deck.main_deck) % 2:
            raise DecodeError(
                EventKind.DECK_LISTS, f"deck {deck.id!r} has an odd-length mainDeck"
            )
        cards: dict[int, int] = {}
        for card_id, count in zip(deck.main_deck[::2], deck.main_deck[1::2], strict=True):
            cards[card_id] = cards.get(card_id, 0) + count
        decks.append(DeckList(deck_id=deck.id, name=deck.name, cards=cards))
    return DeckListsSnapshot(decks=tuple(decks))


DECODERS: dict[EventKind, Callable[[str], Snapshot]] = {
    EventKind.COLLECTION: decode_collection,
    EventKind.INVENTORY: decode_inventory,
    EventKind.BOOSTER_OPEN: decode_booster_open,
    EventKind.DECK_LISTS: decode_deck_lists,
}


def decode_event(event: LogEvent) -> Snapshot:
    """
    Decode a scanned event with the decoder for its kind.

    Raises:
        DecodeError: If the payload is malformed
    """
    return DECODERS[event.kind](event.payload)
