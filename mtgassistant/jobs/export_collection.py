"""
Export the card collection from an Arena client log.

Prints one line per owned card in Arena format, ready to paste into
deck builders:

    4 Llanowar Elves (M19) 314

Run with `mtga-export` or `python -m mtgassistant.jobs.export_collection`.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from mtgassistant.config import settings
from mtgassistant.models.failure import KnownError, TransportError
from mtgassistant.models.snapshots import EventKind
from mtgassistant.services.card_formatter import format_collection, format_inventory
from mtgassistant.services.card_index import CardIndex, build_card_index
from mtgassistant.services.snapshot_finder import LogExtraction, extract_log, select_current

logger = logging.getLogger(__name__)


def read_log(log_file: Path, include_inventory: bool) -> LogExtraction:
    """
    Extract collection (and optionally inventory) snapshots from a log file.

    Raises:
        TransportError: If the log file cannot be opened or read
    """
    kinds = [EventKind.COLLECTION]
    if include_inventory:
        kinds.append(EventKind.INVENTORY)

    try:
        with open(log_file, "rb") as f:
            return extract_log(f, kinds)
    except OSError as e:
        raise TransportError(f"{log_file}: {e}") from e


def render_text(extraction: LogExtraction, index: CardIndex, include_inventory: bool) -> str:
    """Render the current collection (and inventory) as plain text."""
    collection = select_current(extraction.collections, EventKind.COLLECTION)
    lines = format_collection(collection, index)

    if include_inventory:
        inventory = select_current(extraction.inventories, EventKind.INVENTORY)
        lines.append("")
        lines.extend(format_inventory(inventory))

    return "\n".join(lines)


def render_json(extraction: LogExtraction, index: CardIndex, include_inventory: bool) -> str:
    """Render the current collection (and inventory) as JSON."""
    collection = select_current(extraction.collections, EventKind.COLLECTION)
    cards = []
    for card_id, count in collection.cards.items():
        card = index.resolve(card_id)
        cards.append(
            {
                "id": card_id,
                "count": count,
                "name": card.name,
                "set": card.set_code,
                "collector_number": card.collector_number,
                "known": card_id in index,
            }
        )

    output: dict[str, object] = {"cards": cards}
    if include_inventory:
        inventory = select_current(extraction.inventories, EventKind.INVENTORY)
        output["inventory"] = dict(inventory.values)

    return json.dumps(output, indent=2)


def run_export(
    log_file: Path,
    data_dir: Path,
    include_inventory: bool = False,
    as_json: bool = False,
) -> str:
    """
    Extract and render the current collection.

    Raises:
        KnownError: If the log cannot be read, holds no collection (or no
            inventory when requested), or the card index cannot be built
    """
    logger.info("Parsing MTGA log %s...", log_file)
    extraction = read_log(log_file, include_inventory)
    # Fail on a log without collection before indexing the data files
    select_current(extraction.collections, EventKind.COLLECTION)

    logger.info("Parsing MTG data files in %s...", data_dir)
    index = build_card_index(data_dir)

    if as_json:
        return render_json(extraction, index, include_inventory)
    return render_text(extraction, index, include_inventory)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Export the card collection from an MTGA log")
    parser.add_argument(
        "--log-file",
        type=Path,
        default=settings.log_file,
        help="Path to the MTG Arena output log",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=settings.data_dir,
        help="Path to the Downloads/Data folder inside the MTG Arena install directory",
    )
    parser.add_argument(
        "--inventory",
        action="store_true",
        help="Also output the player inventory",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of Arena text lines",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        output = run_export(args.log_file, args.data_dir, args.inventory, args.json)
    except KnownError as e:
        logger.error("%s (%s)", e.message, e.detail)
        if e.suggestion:
            logger.error("%s", e.suggestion)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
