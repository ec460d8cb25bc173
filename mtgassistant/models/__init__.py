from mtgassistant.models.card import WILDCARD_RARITIES, Card, Rarity, unknown_card
from mtgassistant.models.failure import (
    ApiResponse,
    FailureDetail,
    FailureKind,
    IndexBuildError,
    KnownError,
    NoOccurrenceError,
    OutcomeType,
    TransportError,
    create_known_failure_from,
    create_success,
    create_unknown_failure,
    finalize_response,
    is_finalized,
)
from mtgassistant.models.snapshots import (
    BoosterOpenEvent,
    CollectionSnapshot,
    DeckList,
    DeckListsSnapshot,
    EventKind,
    InventorySnapshot,
    Snapshot,
)

__all__ = [
    "ApiResponse",
    "BoosterOpenEvent",
    "Card",
    "CollectionSnapshot",
    "DeckList",
    "DeckListsSnapshot",
    "EventKind",
    "FailureDetail",
    "FailureKind",
    "IndexBuildError",
    "InventorySnapshot",
    "KnownError",
    "NoOccurrenceError",
    "OutcomeType",
    "Rarity",
    "Snapshot",
    "TransportError",
    "WILDCARD_RARITIES",
    "create_known_failure_from",
    "create_success",
    "create_unknown_failure",
    "finalize_response",
    "is_finalized",
    "unknown_card",
]
