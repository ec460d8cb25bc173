from mtgassistant.parsers.event_decoders import (
    DECODERS,
    DecodeError,
    decode_booster_open,
    decode_collection,
    decode_deck_lists,
    decode_event,
    decode_inventory,
)
from mtgassistant.parsers.log_scanner import MARKERS, LogEvent, Marker, PayloadPolicy, scan_log

__all__ = [
    "DECODERS",
    "DecodeError",
    "LogEvent",
    "MARKERS",
    "Marker",
    "PayloadPolicy",
    "decode_booster_open",
    "decode_collection",
    "decode_deck_lists",
    "decode_event",
    "decode_inventory",
    "scan_log",
]
