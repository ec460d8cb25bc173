"""Tests for booster tracking and the wildcard picker."""

import pytest

from mtgassistant.models.card import Rarity
from mtgassistant.models.failure import NoOccurrenceError
from mtgassistant.models.snapshots import BoosterOpenEvent
from mtgassistant.services.booster_session import (
    BoosterSession,
    format_wildcard_block,
    seed_from_booster,
)
from mtgassistant.services.card_index import CardIndex


@pytest.fixture
def boosters() -> list[BoosterOpenEvent]:
    return [
        BoosterOpenEvent(card_ids=(101, 104, 101), common_wildcards=1, rare_wildcards=1),
        BoosterOpenEvent(card_ids=(103, 999999), uncommon_wildcards=2, mythic_wildcards=1),
    ]


@pytest.fixture
def session(boosters: list[BoosterOpenEvent], card_index: CardIndex) -> BoosterSession:
    return BoosterSession(boosters, card_index, "SET1")


class TestSessionTotals:
    def test_card_counts(self, session: BoosterSession) -> None:
        assert session.card_counts() == {101: 2, 104: 1, 103: 1, 999999: 1}

    def test_wildcard_totals(self, session: BoosterSession) -> None:
        assert session.wildcard_totals() == {
            Rarity.COMMON: 1,
            Rarity.UNCOMMON: 2,
            Rarity.RARE: 1,
            Rarity.MYTHIC: 1,
        }

    def test_empty_session(self, card_index: CardIndex) -> None:
        session = BoosterSession([], card_index, "SET1")

        assert session.card_counts() == {}
        assert set(session.wildcard_totals().values()) == {0}
        assert session.booster_texts() == []


class TestSessionText:
    def test_booster_texts(self, session: BoosterSession) -> None:
        texts = session.booster_texts()

        assert len(texts) == 2
        assert texts[0] == (
            "1 Grizzly (SET1) 1\n"
            "1 Elf (SET1) 4\n"
            "1 Grizzly (SET1) 1\n"
            "\n\n\n"
            "Common Wildcards: 1\n"
            "Uncommon Wildcards: 0\n"
            "Rare Wildcards: 1\n"
            "Mythic Wildcards: 0\n"
        )
        assert texts[1].startswith("1 Dragon (SET1) 3\n1 Unknown Card 999999 (???) 0\n")

    def test_summary_text(self, session: BoosterSession) -> None:
        assert session.summary_text() == (
            "2 Grizzly (SET1) 1\n"
            "1 Elf (SET1) 4\n"
            "1 Dragon (SET1) 3\n"
            "1 Unknown Card 999999 (???) 0\n"
        )

    def test_wildcard_text(self, session: BoosterSession) -> None:
        assert session.wildcard_text() == (
            "\nTOTAL:\n"
            "Common Wildcards: 1\n"
            "Uncommon Wildcards: 2\n"
            "Rare Wildcards: 1\n"
            "Mythic Wildcards: 1\n"
        )

    def test_wildcard_block_defaults_missing_rarities(self) -> None:
        assert format_wildcard_block({Rarity.RARE: 3}) == (
            "Common Wildcards: 0\n"
            "Uncommon Wildcards: 0\n"
            "Rare Wildcards: 3\n"
            "Mythic Wildcards: 0\n"
        )


class TestWildcardPicker:
    def test_seed_from_first_booster(
        self, session: BoosterSession, boosters: list[BoosterOpenEvent]
    ) -> None:
        assert seed_from_booster(boosters[0]) == 306
        assert session.pick_wildcards().seed == 306

    def test_picks_come_from_primary_pools(self, session: BoosterSession) -> None:
        result = session.pick_wildcards(seed=1)

        assert len(result.picks[Rarity.COMMON]) == 1
        assert set(result.picks[Rarity.COMMON]) <= {101, 102}
        assert set(result.picks[Rarity.RARE]) <= {104, 107}
        assert result.picks[Rarity.MYTHIC] == (103,)

    def test_reproducible(self, session: BoosterSession) -> None:
        assert session.pick_wildcards(seed=7) == session.pick_wildcards(seed=7)

    def test_same_result_across_sessions(
        self, boosters: list[BoosterOpenEvent], card_index: CardIndex
    ) -> None:
        first = BoosterSession(boosters, card_index, "SET1").pick_wildcards()
        second = BoosterSession(boosters, card_index, "SET1").pick_wildcards()

        assert first == second

    def test_empty_pool_skipped(self, session: BoosterSession) -> None:
        """SET1 has no primary uncommons, so those wildcards stay unredeemed."""
        result = session.pick_wildcards(seed=1)

        assert result.picks[Rarity.UNCOMMON] == ()
        assert sum(len(picked) for picked in result.picks.values()) == 3

    def test_card_counts_include_picks(self, session: BoosterSession) -> None:
        result = session.pick_wildcards(seed=1)

        assert result.card_counts[103] == 2
        assert sum(result.card_counts.values()) == sum(session.card_counts().values()) + 3

    def test_pick_text(self, session: BoosterSession) -> None:
        result = session.pick_wildcards(seed=1)

        lines = result.text.splitlines()
        assert len(lines) == 3
        assert lines[-1] == "1 Dragon (SET1) 3"

    def test_unknown_set_picks_nothing(
        self, boosters: list[BoosterOpenEvent], card_index: CardIndex
    ) -> None:
        result = BoosterSession(boosters, card_index, "NOPE").pick_wildcards()

        assert all(picked == () for picked in result.picks.values())

    def test_no_boosters(self, card_index: CardIndex) -> None:
        with pytest.raises(NoOccurrenceError):
            BoosterSession([], card_index, "SET1").pick_wildcards()

    def test_session_data_not_shared(self, card_index: CardIndex) -> None:
        first = BoosterSession([BoosterOpenEvent(card_ids=(101,))], card_index, "SET1")
        second = BoosterSession([BoosterOpenEvent(card_ids=(102,))], card_index, "SET1")

        assert first.card_counts() == {101: 1}
        assert second.card_counts() == {102: 1}
