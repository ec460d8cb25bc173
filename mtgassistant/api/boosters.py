"""
Booster tracker API endpoints.

Extracts opened boosters from an uploaded Arena log and redeems the
wildcards they awarded for pseudo-random cards of the current set.
"""

import io
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from mtgassistant.api.uploads import read_log_upload
from mtgassistant.config import settings
from mtgassistant.models.failure import ApiResponse, create_success
from mtgassistant.services.booster_session import BoosterSession
from mtgassistant.services.card_formatter import BoosterReport, booster_reports
from mtgassistant.services.card_index import CardIndex, get_card_index
from mtgassistant.services.snapshot_finder import find_boosters

router = APIRouter(tags=["boosters"])


class BoosterTrackResponse(BaseModel):
    """Response model for booster tracking."""

    boosters: list[BoosterReport] = Field(default_factory=list)
    booster_texts: list[str] = Field(
        default_factory=list,
        description="Per booster: card lines followed by its wildcards",
    )
    summary_text: str = Field(default="", description="All opened cards with counts")
    wildcard_text: str = Field(default="", description="Wildcard totals")
    wildcard_totals: dict[str, int] = Field(
        default_factory=dict,
        description="Wildcards by rarity (common, uncommon, rare, mythic)",
    )


class WildcardPickResponse(BaseModel):
    """Response model for wildcard picking."""

    set_code: str
    seed: int
    picks: dict[str, list[int]] = Field(
        default_factory=dict,
        description="Picked card IDs by rarity, in draw order",
    )
    only_wc_text: str = Field(default="", description="One line per picked card")
    summary_text: str = Field(default="", description="Opened plus picked cards")
    wildcard_text: str = Field(default="", description="Wildcard totals")


def _track(stream: io.BytesIO, index: CardIndex, set_code: str) -> BoosterTrackResponse:
    session = BoosterSession(find_boosters(stream), index, set_code)
    return BoosterTrackResponse(
        boosters=booster_reports(list(session.boosters), index),
        booster_texts=session.booster_texts(),
        summary_text=session.summary_text(),
        wildcard_text=session.wildcard_text(),
        wildcard_totals={
            rarity.name.lower(): total for rarity, total in session.wildcard_totals().items()
        },
    )


def _pick(
    stream: io.BytesIO, index: CardIndex, set_code: str, seed: int | None
) -> WildcardPickResponse:
    session = BoosterSession(find_boosters(stream), index, set_code)
    pick = session.pick_wildcards(seed)
    return WildcardPickResponse(
        set_code=set_code,
        seed=pick.seed,
        picks={rarity.name.lower(): list(ids) for rarity, ids in pick.picks.items()},
        only_wc_text=pick.text,
        summary_text=session.render_counts(pick.card_counts),
        wildcard_text=session.wildcard_text(),
    )


@router.post("/boosters", response_model=ApiResponse[BoosterTrackResponse])
async def track_boosters(
    mtgalogs: Annotated[UploadFile, File(description="Arena output_log.txt")],
    index: Annotated[CardIndex, Depends(get_card_index)],
) -> ApiResponse[BoosterTrackResponse]:
    """
    List every booster opened in the uploaded log.

    A log without booster openings is a valid, empty result.
    """
    stream = await read_log_upload(mtgalogs)
    # Scanning is CPU bound; keep it off the event loop
    result = await run_in_threadpool(_track, stream, index, settings.wildcard_set)
    return create_success(result)


@router.post("/wildcards", response_model=ApiResponse[WildcardPickResponse])
async def pick_wildcards(
    mtgalogs: Annotated[UploadFile, File(description="Arena output_log.txt")],
    index: Annotated[CardIndex, Depends(get_card_index)],
    set_code: Annotated[str | None, Form()] = None,
    seed: Annotated[int | None, Form()] = None,
) -> ApiResponse[WildcardPickResponse]:
    """
    Redeem the wildcards from the uploaded log's boosters.

    Picks are reproducible: the same log, set and seed give the same cards.
    Fails with a known failure if the log has no booster openings.
    """
    stream = await read_log_upload(mtgalogs)
    result = await run_in_threadpool(
        _pick, stream, index, set_code or settings.wildcard_set, seed
    )
    return create_success(result)
