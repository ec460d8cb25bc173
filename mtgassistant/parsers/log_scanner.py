"""
Scanner for the Arena client log (output_log.txt / Player.log).

The log is an append-only mix of free text and JSON responses. Responses
we care about are announced by a marker line such as:

    <== PlayerInventory.GetPlayerCardsV3(12)
    {
      "id": 12,
      "payload": { "67810": 4, "67812": 2 }
    }

The scanner makes a single forward pass, line by line, and captures the
payload following each recognized marker. How far a payload extends
depends on the marker:

- BALANCED: one JSON value starting at the first "{" or "[" after the
  marker, ending at its matching bracket.
- NEXT_MARKER: everything up to the next recognized marker or end of stream.

The scanner never decodes JSON; it only isolates payload text. Bytes that
are not valid UTF-8 are replaced, truncated payloads are dropped, and the
pass always runs to the end of the stream.
"""

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import IO

from mtgassistant.models.failure import TransportError
from mtgassistant.models.snapshots import EventKind

logger = logging.getLogger(__name__)


class PayloadPolicy(Enum):
    """Rule deciding where a captured payload ends."""

    BALANCED = "balanced"
    NEXT_MARKER = "next_marker"


@dataclass(frozen=True, slots=True)
class Marker:
    """A marker string announcing one event kind."""

    kind: EventKind
    text: str
    policy: PayloadPolicy


MARKERS: tuple[Marker, ...] = (
    Marker(EventKind.COLLECTION, "<== PlayerInventory.GetPlayerCardsV3(", PayloadPolicy.BALANCED),
    Marker(EventKind.INVENTORY, "<== PlayerInventory.GetPlayerInventory(", PayloadPolicy.BALANCED),
    Marker(
        EventKind.BOOSTER_OPEN, "<== PlayerInventory.CrackBoostersV3(", PayloadPolicy.BALANCED
    ),
    Marker(EventKind.DECK_LISTS, "<== Deck.GetDeckListsV3(", PayloadPolicy.NEXT_MARKER),
)

_CLOSER_FOR = {"{": "}", "[": "]"}
_CLOSERS = frozenset(_CLOSER_FOR.values())

# An opening bracket followed by something JSON can continue with. Rules out
# log prefixes such as "[UnityCrossThreadLogger]".
_JSON_START = re.compile(r'\{\s*(?:"|\}|$)|\[\s*(?:[\[\]{"\-0-9tfn]|$)')


@dataclass(frozen=True, slots=True)
class LogEvent:
    """
    One recognized event occurrence.

    Attributes:
        kind: Event kind identified by the marker
        payload: Raw payload text (not yet decoded)
        position: 0-based ordinal among emitted events, in stream order
        line_number: 1-based line number of the marker line
    """

    kind: EventKind
    payload: str
    position: int
    line_number: int


def find_json_start(text: str) -> int:
    """Index of the first "{" or "[" that can start a JSON value, or -1."""
    match = _JSON_START.search(text)
    return match.start() if match else -1


class _BalancedCapture:
    """Accumulates one JSON value until its outermost bracket closes."""

    def __init__(self, marker: Marker, line_number: int) -> None:
        self.marker = marker
        self.line_number = line_number
        self.complete = False
        self.abandoned = False
        self._started = False
        self._chunks: list[str] = []
        self._expected: list[str] = []
        self._in_string = False
        self._escaped = False

    def feed(self, text: str, first_line: bool = False) -> None:
        if not self._started:
            start = find_json_start(text)
            # Only the marker line may carry text before the payload
            if not first_line and text[: start if start >= 0 else len(text)].strip():
                self.abandoned = True
                return
            if start < 0:
                return
            text = text[start:]
            self._started = True

        for index, char in enumerate(text):
            if self._in_string:
                if self._escaped:
                    self._escaped = False
                elif char == "\\":
                    self._escaped = True
                elif char == '"':
                    self._in_string = False
                continue

            if char == '"':
                self._in_string = True
            elif char in _CLOSER_FOR:
                self._expected.append(_CLOSER_FOR[char])
            elif char in _CLOSERS:
                if not self._expected or self._expected.pop() != char:
                    self.abandoned = True
                    return
                if not self._expected:
                    self._chunks.append(text[: index + 1])
                    self.complete = True
                    return

        self._chunks.append(text)

    @property
    def payload(self) -> str:
        return "".join(self._chunks)

    def close(self) -> None:
        """Discard the capture: a value still open when interrupted is truncated."""
        if self._started:
            logger.warning(
                "Discarding truncated %s payload from line %d",
                self.marker.kind.value,
                self.line_number,
            )
        else:
            logger.debug(
                "No payload followed %s marker at line %d",
                self.marker.kind.value,
                self.line_number,
            )


class _NextMarkerCapture:
    """Accumulates every line until the next marker or end of stream."""

    def __init__(self, marker: Marker, line_number: int) -> None:
        self.marker = marker
        self.line_number = line_number
        self.complete = False
        self.abandoned = False
        self._chunks: list[str] = []

    def feed(self, text: str, first_line: bool = False) -> None:
        self._chunks.append(text)

    @property
    def payload(self) -> str:
        return "".join(self._chunks)

    def close(self) -> str | None:
        payload = self.payload
        if not payload.strip():
            logger.debug(
                "Empty %s payload at line %d", self.marker.kind.value, self.line_number
            )
            return None
        return payload


_Capture = _BalancedCapture | _NextMarkerCapture


def _new_capture(marker: Marker, line_number: int) -> _Capture:
    if marker.policy is PayloadPolicy.BALANCED:
        return _BalancedCapture(marker, line_number)
    return _NextMarkerCapture(marker, line_number)


def match_marker(line: str) -> tuple[Marker | None, str]:
    """
    Match a line against the marker table.

    Returns:
        (marker, text after the marker) or (None, "") if no marker matched
    """
    for marker in MARKERS:
        index = line.find(marker.text)
        if index >= 0:
            return marker, line[index + len(marker.text) :]
    return None, ""


def _decode_line(raw_line: bytes | str) -> str:
    if isinstance(raw_line, bytes):
        return raw_line.decode("utf-8", errors="replace")
    return raw_line


class _EventCollector:
    """Ordered sink for finished captures."""

    def __init__(self) -> None:
        self.events: list[LogEvent] = []

    def add(self, capture: _Capture, payload: str) -> None:
        self.events.append(
            LogEvent(
                kind=capture.marker.kind,
                payload=payload,
                position=len(self.events),
                line_number=capture.line_number,
            )
        )

    def settle(self, capture: _Capture) -> _Capture | None:
        """Emit or drop a capture that finished on its own; else keep it open."""
        if capture.complete:
            self.add(capture, capture.payload)
            return None
        if capture.abandoned:
            logger.debug(
                "Abandoned %s capture from line %d: no JSON after marker",
                capture.marker.kind.value,
                capture.line_number,
            )
            return None
        return capture

    def close(self, capture: _Capture) -> None:
        """Close a capture interrupted by a marker or end of stream."""
        payload = capture.close()
        if payload is not None:
            self.add(capture, payload)


def scan_log(
    stream: IO[bytes],
    kinds: Iterable[EventKind] | None = None,
) -> list[LogEvent]:
    """
    Scan a log stream for recognized events.

    Args:
        stream: Readable binary stream positioned at the start of the log
        kinds: Event kinds to capture. Defaults to all kinds. Markers of
            other kinds are still recognized and still end pending payloads.

    Returns:
        Captured events in stream order (possibly empty).

    Raises:
        TransportError: If the stream cannot be read
    """
    wanted = frozenset(kinds) if kinds is not None else frozenset(EventKind)
    collector = _EventCollector()
    pending: _Capture | None = None

    try:
        for line_number, raw_line in enumerate(stream, start=1):
            line = _decode_line(raw_line)
            marker, remainder = match_marker(line)

            if marker is not None:
                if pending is not None:
                    collector.close(pending)
                    pending = None
                if marker.kind in wanted:
                    pending = _new_capture(marker, line_number)
                    pending.feed(remainder, first_line=True)
                    pending = collector.settle(pending)
                continue

            if pending is not None:
                pending.feed(line)
                pending = collector.settle(pending)
    except OSError as e:
        raise TransportError(str(e)) from e

    if pending is not None:
        collector.close(pending)

    logger.debug("Scanned log: %d events captured", len(collector.events))
    return collector.events
