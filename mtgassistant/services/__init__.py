"""
MTG Assistant services.

Snapshot extraction from the Arena log, card index and rendering.
"""

from mtgassistant.services.booster_session import (
    BoosterSession,
    WildcardPick,
    seed_from_booster,
)
from mtgassistant.services.card_formatter import (
    BoosterReport,
    booster_reports,
    boosters_from_json,
    boosters_to_json,
    format_card_line,
    format_collection,
    format_inventory,
)
from mtgassistant.services.card_index import CardIndex, build_card_index, get_card_index
from mtgassistant.services.snapshot_finder import (
    LogExtraction,
    current_collection,
    current_inventory,
    extract_log,
    find_boosters,
    find_collections,
    find_deck_lists,
    find_inventories,
    select_current,
)

__all__ = [
    "BoosterReport",
    "BoosterSession",
    "CardIndex",
    "LogExtraction",
    "WildcardPick",
    "booster_reports",
    "boosters_from_json",
    "boosters_to_json",
    "build_card_index",
    "current_collection",
    "current_inventory",
    "extract_log",
    "find_boosters",
    "find_collections",
    "find_deck_lists",
    "find_inventories",
    "format_card_line",
    "format_collection",
    "format_inventory",
    "get_card_index",
    "seed_from_booster",
    "select_current",
]
