import io
import json
from pathlib import Path
from textwrap import dedent

import pytest
from httpx import ASGITransport, AsyncClient

from mtgassistant.main import app
from mtgassistant.services.card_index import CardIndex, build_card_index, get_card_index


COLLECTION_OLD = dedent(
    """\
    [UnityCrossThreadLogger]1/5/2021 10:00:00 AM
    <== PlayerInventory.GetPlayerCardsV3(11)
    {
      "id": 11,
      "payload": {
        "101": 2,
        "102": 4
      }
    }
    """
)

INVENTORY = dedent(
    """\
    [UnityCrossThreadLogger]1/5/2021 10:00:01 AM
    <== PlayerInventory.GetPlayerInventory(12)
    {
      "id": 12,
      "payload": {
        "playerId": "A1B2C3",
        "wcCommon": 10,
        "wcUncommon": 5,
        "wcRare": 2,
        "wcMythic": 1,
        "gold": 1500,
        "gems": 200,
        "vaultProgress": 12.5
      }
    }
    """
)

BOOSTER_ONE = (
    "<== PlayerInventory.CrackBoostersV3(13)\n"
    '{"id":13,"payload":{"cardsOpened":['
    '{"grpId":101,"goldAwarded":0,"gemsAwarded":0,"set":"SET1"},'
    '{"grpId":104,"goldAwarded":0,"gemsAwarded":0,"set":"SET1"},'
    '{"grpId":101,"goldAwarded":0,"gemsAwarded":0,"set":"SET1"}],'
    '"totalVaultProgress":3,"wildCardTrackCommons":1,"wildCardTrackRares":1}}\n'
)

BOOSTER_TWO = (
    "<== PlayerInventory.CrackBoostersV3(16)\n"
    '{"id":16,"payload":{"cardsOpened":[{"grpId":103},{"grpId":999999}],'
    '"wildCardTrackUnCommons":2,"wildCardTrackMythics":1}}\n'
)

DECK_LISTS = dedent(
    """\
    <== Deck.GetDeckListsV3(14)
    {"id":14,"payload":[{"id":"deck-1","name":"Bears","mainDeck":[101,4,102,2]}]}
    [UnityCrossThreadLogger]Client.SceneChange
    """
)

COLLECTION_NEW = dedent(
    """\
    [UnityCrossThreadLogger]1/5/2021 10:05:00 AM
    <== PlayerInventory.GetPlayerCardsV3(15)
    {
      "id": 15,
      "payload": {
        "101": 3,
        "102": 4,
        "104": 1
      }
    }
    """
)


@pytest.fixture
def sample_log() -> bytes:
    """Arena log with two collections, an inventory, two boosters and deck lists."""
    text = "".join(
        [
            "Initialize engine version: 2019.4.3f1\n",
            COLLECTION_OLD,
            INVENTORY,
            BOOSTER_ONE,
            DECK_LISTS,
            COLLECTION_NEW,
            BOOSTER_TWO,
            "[UnityCrossThreadLogger]Shutting down\n",
        ]
    )
    return text.encode("utf-8")


@pytest.fixture
def sample_log_stream(sample_log: bytes) -> io.BytesIO:
    return io.BytesIO(sample_log)


def _card(grpid: int, title_id: int, set_code: str, number: str, rarity: int, primary=True):
    return {
        "grpid": grpid,
        "titleId": title_id,
        "set": set_code,
        "CollectorNumber": number,
        "rarity": rarity,
        "isPrimaryCard": primary,
        "isToken": False,
        "artId": grpid * 10,
    }


@pytest.fixture
def card_data_dir(tmp_path: Path) -> Path:
    """Arena Downloads/Data folder with a base card file and a patch file."""
    data_dir = tmp_path / "Data"
    data_dir.mkdir()

    loc = [
        {
            "langkey": "EN",
            "isoCode": "en-US",
            "keys": [
                {"id": 1, "text": "Bear"},
                {"id": 2, "text": "Grizzly"},
                {"id": 3, "text": "Shock"},
                {"id": 4, "text": "Dragon"},
                {"id": 5, "text": "Elf"},
                {"id": 6, "text": "Knight"},
            ],
        },
        {"langkey": "FR", "isoCode": "fr-FR", "keys": [{"id": 1, "text": "Ours"}]},
    ]
    base = [
        _card(101, 1, "SET1", "1", 2),
        _card(102, 3, "SET1", "2", 2),
        _card(103, 4, "SET1", "3", 5),
        _card(104, 5, "SET1", "4", 4),
        _card(105, 5, "SET1", "4a", 4, primary=False),
        _card(106, 1, "SET2", "1", 4),
        _card(107, 6, "SET1", "7", 4),
    ]
    patch = [_card(101, 2, "SET1", "1", 2)]

    (data_dir / "data_loc_base.mtga").write_text(json.dumps(loc), encoding="utf-8")
    (data_dir / "data_cards_a_base.mtga").write_text(json.dumps(base), encoding="utf-8")
    (data_dir / "data_cards_b_patch.mtga").write_text(json.dumps(patch), encoding="utf-8")
    return data_dir


@pytest.fixture
def card_index(card_data_dir: Path) -> CardIndex:
    return build_card_index(card_data_dir)


@pytest.fixture
async def client(card_index: CardIndex):
    """Async test client serving the fixture card index."""
    app.dependency_overrides[get_card_index] = lambda: card_index

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
