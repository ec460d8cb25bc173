"""
Card index service.

Builds an in-memory index of Arena card metadata from the client's
Downloads/Data directory:

- data_cards_*.mtga: JSON list of card records (grpid, titleId, set,
  CollectorNumber, rarity, isPrimaryCard, ...)
- data_loc_*.mtga: JSON list of localization tables; the "EN" table maps
  title IDs to card names

Files are loaded in sorted path order and later records replace earlier
ones with the same ID, so patch files layer over the base set.
"""

import json
import logging
from collections.abc import Callable, Iterator, Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, ValidationError

from mtgassistant.config import settings
from mtgassistant.models.card import Card, Rarity, unknown_card
from mtgassistant.models.failure import IndexBuildError

logger = logging.getLogger(__name__)

CARD_FILE_GLOB = "data_cards_*.mtga"
LOC_FILE_GLOB = "data_loc_*.mtga"
LOC_LANGUAGE = "EN"


class CardIndex:
    """
    Read-only index of cards by Arena ID.

    Fully built before construction returns and never mutated afterwards,
    so one instance can be shared by any number of readers.
    """

    def __init__(self, cards: Mapping[int, Card]) -> None:
        self._cards: Mapping[int, Card] = MappingProxyType(dict(cards))

        pools: dict[tuple[str, Rarity], list[int]] = {}
        for card in self._cards.values():
            if card.is_primary_card:
                pools.setdefault((card.set_code, card.rarity), []).append(card.id)
        self._primary_pools: Mapping[tuple[str, Rarity], tuple[int, ...]] = MappingProxyType(
            {key: tuple(ids) for key, ids in pools.items()}
        )

    def __len__(self) -> int:
        return len(self._cards)

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._cards

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards.values())

    def lookup(self, card_id: int) -> Card | None:
        """Point lookup. Returns None for IDs not in the index."""
        return self._cards.get(card_id)

    def resolve(self, card_id: int) -> Card:
        """Lookup that returns the unknown-card placeholder on a miss."""
        card = self._cards.get(card_id)
        if card is None:
            return unknown_card(card_id)
        return card

    def primary_pool(self, set_code: str, rarity: Rarity) -> tuple[int, ...]:
        """IDs of primary cards in a set with a rarity, in insertion order."""
        return self._primary_pools.get((set_code, rarity), ())

    def for_each_primary_in_set(
        self,
        set_code: str,
        rarity: Rarity,
        visit: Callable[[Card], None],
    ) -> None:
        """Call visit for each primary card of the set and rarity, in insertion order."""
        for card_id in self.primary_pool(set_code, rarity):
            visit(self._cards[card_id])

    def set_codes(self) -> set[str]:
        """All set codes present in the index."""
        return {card.set_code for card in self._cards.values()}


# =============================================================================
# DATA FILE RECORDS
# =============================================================================


class _CardRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    grpid: NonNegativeInt
    title_id: int = Field(alias="titleId")
    set_code: str = Field(alias="set")
    collector_number: str | int = Field(default="", alias="CollectorNumber")
    rarity: Rarity
    is_primary_card: bool = Field(default=False, alias="isPrimaryCard")


class _LocKey(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    text: str


class _LocTable(BaseModel):
    model_config = ConfigDict(extra="ignore")

    langkey: str
    keys: list[_LocKey] = Field(default_factory=list)


def _read_json_list(path: Path, data_dir: Path) -> list[Any] | None:
    """Read a data file expected to hold a JSON list. None if it doesn't."""
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise IndexBuildError(str(data_dir), f"cannot read {path.name}: {e}") from e

    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning("Skipping %s: not valid JSON (%s)", path.name, e)
        return None

    if not isinstance(data, list):
        logger.warning("Skipping %s: expected a JSON list", path.name)
        return None
    return data


def _find_files(data_dir: Path, pattern: str) -> list[Path]:
    return sorted(
        (path for path in data_dir.rglob(pattern) if path.is_file()),
        key=lambda path: path.relative_to(data_dir).as_posix(),
    )


def load_titles(data_dir: Path) -> dict[int, str]:
    """
    Load English card names keyed by title ID.

    Raises:
        IndexBuildError: If a localization file cannot be read
    """
    titles: dict[int, str] = {}
    for path in _find_files(data_dir, LOC_FILE_GLOB):
        tables = _read_json_list(path, data_dir) or []
        for entry in tables:
            try:
                table = _LocTable.model_validate(entry)
            except ValidationError:
                continue
            if table.langkey != LOC_LANGUAGE:
                continue
            for key in table.keys:
                titles[key.id] = key.text
    return titles


def build_card_index(data_dir: Path) -> CardIndex:
    """
    Build the card index from an Arena data directory.

    Args:
        data_dir: The Downloads/Data folder (searched recursively)

    Returns:
        Fully built CardIndex

    Raises:
        IndexBuildError: If the directory is missing, a data file cannot be
            read, or no card record could be parsed
    """
    if not data_dir.is_dir():
        raise IndexBuildError(str(data_dir), "directory does not exist")

    try:
        titles = load_titles(data_dir)
        card_files = _find_files(data_dir, CARD_FILE_GLOB)
    except OSError as e:
        raise IndexBuildError(str(data_dir), f"directory is unreadable: {e}") from e

    cards: dict[int, Card] = {}
    skipped = 0
    for path in card_files:
        records = _read_json_list(path, data_dir) or []
        for entry in records:
            try:
                record = _CardRecord.model_validate(entry)
            except ValidationError as e:
                skipped += 1
                logger.debug("Skipping card record in %s: %s", path.name, e)
                continue
            cards[record.grpid] = Card(
                id=record.grpid,
                name=titles.get(record.title_id, f"Unknown Title {record.title_id}"),
                set_code=record.set_code,
                collector_number=str(record.collector_number),
                rarity=record.rarity,
                is_primary_card=record.is_primary_card,
            )

    if not cards:
        raise IndexBuildError(str(data_dir), "no card records found")

    logger.info(
        "Indexed %d cards from %d files (%d records skipped)",
        len(cards),
        len(card_files),
        skipped,
    )
    return CardIndex(cards)


@lru_cache(maxsize=1)
def get_card_index() -> CardIndex:
    """
    Get the cached card index for the configured data directory.

    Raises:
        IndexBuildError: If the index cannot be built
    """
    return build_card_index(Path(settings.data_dir))
