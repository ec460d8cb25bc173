"""
Snapshot extraction and selection.

Runs the scanner once, routes each payload to its decoder and keeps
decoded results in per-kind lists in log order. Malformed occurrences
are logged and skipped.

Selection policy: the log records state transitions in order, so the
last collection or inventory dump is the current one. Booster openings
are never collapsed.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import IO, TypeVar

from mtgassistant.models.failure import NoOccurrenceError
from mtgassistant.models.snapshots import (
    BoosterOpenEvent,
    CollectionSnapshot,
    DeckListsSnapshot,
    EventKind,
    InventorySnapshot,
)
from mtgassistant.parsers.event_decoders import DecodeError, decode_event
from mtgassistant.parsers.log_scanner import scan_log

logger = logging.getLogger(__name__)

S = TypeVar("S")


@dataclass
class LogExtraction:
    """Decoded results of one pass over a log, per kind, in log order."""

    collections: list[CollectionSnapshot] = field(default_factory=list)
    inventories: list[InventorySnapshot] = field(default_factory=list)
    boosters: list[BoosterOpenEvent] = field(default_factory=list)
    deck_lists: list[DeckListsSnapshot] = field(default_factory=list)
    skipped: int = 0


def extract_log(
    stream: IO[bytes],
    kinds: Iterable[EventKind] | None = None,
) -> LogExtraction:
    """
    Scan a log and decode every captured event.

    Args:
        stream: Readable binary stream positioned at the start of the log
        kinds: Event kinds to extract (default: all)

    Returns:
        LogExtraction with per-kind lists in log order

    Raises:
        TransportError: If the stream cannot be read
    """
    extraction = LogExtraction()

    for event in scan_log(stream, kinds):
        try:
            snapshot = decode_event(event)
        except DecodeError as e:
            extraction.skipped += 1
            logger.warning("Skipping event at line %d: %s", event.line_number, e)
            continue

        if isinstance(snapshot, CollectionSnapshot):
            extraction.collections.append(snapshot)
        elif isinstance(snapshot, InventorySnapshot):
            extraction.inventories.append(snapshot)
        elif isinstance(snapshot, BoosterOpenEvent):
            extraction.boosters.append(snapshot)
        else:
            extraction.deck_lists.append(snapshot)

    logger.info(
        "Extracted %d collections, %d inventories, %d boosters, %d deck lists (%d skipped)",
        len(extraction.collections),
        len(extraction.inventories),
        len(extraction.boosters),
        len(extraction.deck_lists),
        extraction.skipped,
    )
    return extraction


def select_current(snapshots: Sequence[S], kind: EventKind) -> S:
    """
    Pick the snapshot representing current state: the last one in log order.

    Raises:
        NoOccurrenceError: If there are no snapshots
    """
    if not snapshots:
        raise NoOccurrenceError(kind.value)
    return snapshots[-1]


def find_collections(stream: IO[bytes]) -> list[CollectionSnapshot]:
    """All collection snapshots in the log, in order. Empty if none."""
    return extract_log(stream, [EventKind.COLLECTION]).collections


def find_inventories(stream: IO[bytes]) -> list[InventorySnapshot]:
    """All inventory snapshots in the log, in order. Empty if none."""
    return extract_log(stream, [EventKind.INVENTORY]).inventories


def find_boosters(stream: IO[bytes]) -> list[BoosterOpenEvent]:
    """Every booster opening in the log, in order. Empty if none."""
    return extract_log(stream, [EventKind.BOOSTER_OPEN]).boosters


def find_deck_lists(stream: IO[bytes]) -> list[DeckListsSnapshot]:
    """All deck-list dumps in the log, in order. Empty if none."""
    return extract_log(stream, [EventKind.DECK_LISTS]).deck_lists


def current_collection(stream: IO[bytes]) -> CollectionSnapshot:
    """
    The most recent collection in the log.

    Raises:
        NoOccurrenceError: If the log holds no decodable collection
    """
    return select_current(find_collections(stream), EventKind.COLLECTION)


def current_inventory(stream: IO[bytes]) -> InventorySnapshot:
    """
    The most recent inventory in the log.

    Raises:
        NoOccurrenceError: If the log holds no decodable inventory
    """
    return select_current(find_inventories(stream), EventKind.INVENTORY)
