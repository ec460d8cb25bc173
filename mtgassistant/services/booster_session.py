"""
Booster tracking session.

A BoosterSession holds everything derived from one uploaded log: the
opened boosters, the card index used to render them and the set whose
primary cards feed the wildcard picker. Each request builds its own
session, so concurrent requests never share booster data or pools.

Wildcard picking is reproducible: the same boosters, pool and seed always
give the same picks. The default seed is the sum of the card IDs of the
first booster opened. Different boosters can share that sum; pass an
explicit seed when that matters. Picks are drawn with replacement, one
rarity at a time from common to mythic, so the same card can be picked
twice. A rarity whose pool is empty is skipped and draws no numbers.
"""

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from mtgassistant.models.card import WILDCARD_RARITIES, Rarity
from mtgassistant.models.failure import NoOccurrenceError
from mtgassistant.models.snapshots import BoosterOpenEvent, EventKind
from mtgassistant.services.card_formatter import format_card_line
from mtgassistant.services.card_index import CardIndex

logger = logging.getLogger(__name__)


def seed_from_booster(event: BoosterOpenEvent) -> int:
    """Default wildcard seed for a session: sum of the booster's card IDs."""
    return sum(event.card_ids)


def format_wildcard_block(totals: dict[Rarity, int]) -> str:
    return "".join(
        f"{rarity.name.title()} Wildcards: {totals.get(rarity, 0)}\n"
        for rarity in WILDCARD_RARITIES
    )


@dataclass(frozen=True)
class WildcardPick:
    """
    Result of redeeming the session's wildcards.

    Attributes:
        seed: Seed the picks were drawn with
        picks: Rarity -> picked card IDs, in draw order
        card_counts: Opened plus picked cards, card ID -> count
        text: One rendered line per pick
    """

    seed: int
    picks: dict[Rarity, tuple[int, ...]] = field(default_factory=dict)
    card_counts: dict[int, int] = field(default_factory=dict)
    text: str = ""


class BoosterSession:
    """Booster history of one log, rendered against one card index."""

    def __init__(
        self,
        boosters: Sequence[BoosterOpenEvent],
        index: CardIndex,
        set_code: str,
    ) -> None:
        self.boosters = tuple(boosters)
        self.index = index
        self.set_code = set_code
        self._rarity_pools: dict[Rarity, tuple[int, ...]] | None = None

    def card_counts(self) -> dict[int, int]:
        """Opened card ID -> copies across all boosters, first-seen order."""
        counts: dict[int, int] = {}
        for booster in self.boosters:
            for card_id in booster.card_ids:
                counts[card_id] = counts.get(card_id, 0) + 1
        return counts

    def wildcard_totals(self) -> dict[Rarity, int]:
        """Wildcards awarded across all boosters, per rarity."""
        return {
            rarity: sum(booster.wildcards(rarity) for booster in self.boosters)
            for rarity in WILDCARD_RARITIES
        }

    def booster_texts(self) -> list[str]:
        """Per booster: one line per card, then its wildcards."""
        texts: list[str] = []
        for booster in self.boosters:
            lines = "".join(
                format_card_line(1, self.index.resolve(card_id)) + "\n"
                for card_id in booster.card_ids
            )
            block = format_wildcard_block(
                {rarity: booster.wildcards(rarity) for rarity in WILDCARD_RARITIES}
            )
            texts.append(f"{lines}\n\n\n{block}")
        return texts

    def summary_text(self) -> str:
        """All opened cards with their counts."""
        return self.render_counts(self.card_counts())

    def wildcard_text(self) -> str:
        """Total wildcards across the session."""
        return "\nTOTAL:\n" + format_wildcard_block(self.wildcard_totals())

    def rarity_pools(self) -> dict[Rarity, tuple[int, ...]]:
        """Primary cards of the session's set, per wildcard rarity."""
        if self._rarity_pools is None:
            self._rarity_pools = {
                rarity: self.index.primary_pool(self.set_code, rarity)
                for rarity in WILDCARD_RARITIES
            }
        return self._rarity_pools

    def pick_wildcards(self, seed: int | None = None) -> WildcardPick:
        """
        Redeem every wildcard in the session for a pseudo-random card.

        Args:
            seed: Seed for the picks. Defaults to seed_from_booster() of
                the first booster.

        Returns:
            WildcardPick with picks per rarity and combined card counts

        Raises:
            NoOccurrenceError: If the session has no boosters
        """
        if not self.boosters:
            raise NoOccurrenceError(EventKind.BOOSTER_OPEN.value)

        if seed is None:
            seed = seed_from_booster(self.boosters[0])

        rng = random.Random(seed)
        totals = self.wildcard_totals()
        pools = self.rarity_pools()
        counts = self.card_counts()
        picks: dict[Rarity, tuple[int, ...]] = {}
        lines: list[str] = []

        for rarity in WILDCARD_RARITIES:
            pool = pools[rarity]
            total = totals[rarity]
            if total and not pool:
                logger.warning(
                    "No primary %s cards in set %s; %d wildcards not redeemed",
                    rarity.name.lower(),
                    self.set_code,
                    total,
                )
                picks[rarity] = ()
                continue

            drawn = tuple(pool[rng.randrange(len(pool))] for _ in range(total))
            for card_id in drawn:
                counts[card_id] = counts.get(card_id, 0) + 1
                card = self.index.resolve(card_id)
                logger.debug("Picked %s wildcard: %d %s", rarity.name.lower(), card_id, card.name)
                lines.append(format_card_line(1, card))
            picks[rarity] = drawn

        return WildcardPick(
            seed=seed,
            picks=picks,
            card_counts=counts,
            text="".join(line + "\n" for line in lines),
        )

    def render_counts(self, counts: dict[int, int]) -> str:
        """Render card ID -> count as Arena lines."""
        return "".join(
            format_card_line(count, self.index.resolve(card_id)) + "\n"
            for card_id, count in counts.items()
        )
