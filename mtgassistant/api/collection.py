"""
Collection API endpoint.

Exports the current collection (and inventory, when present) from an
uploaded Arena log.
"""

import io
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from mtgassistant.api.uploads import read_log_upload
from mtgassistant.models.failure import ApiResponse, create_success
from mtgassistant.models.snapshots import EventKind
from mtgassistant.services.card_formatter import format_collection, format_inventory
from mtgassistant.services.card_index import CardIndex, get_card_index
from mtgassistant.services.snapshot_finder import extract_log, select_current

router = APIRouter(prefix="/collection", tags=["collection"])


class CollectionExportResponse(BaseModel):
    """Response model for a collection export."""

    cards: list[str] = Field(
        default_factory=list,
        description="One Arena-format line per owned card",
    )
    total_cards: int = 0
    unique_cards: int = 0
    inventory: list[str] | None = Field(
        default=None,
        description="Inventory counters, if the log contains an inventory",
    )
    snapshots_found: int = Field(
        default=0,
        description="Collection dumps in the log; the last one is exported",
    )


def _export(stream: io.BytesIO, index: CardIndex) -> CollectionExportResponse:
    extraction = extract_log(stream, [EventKind.COLLECTION, EventKind.INVENTORY])
    collection = select_current(extraction.collections, EventKind.COLLECTION)

    inventory = None
    if extraction.inventories:
        inventory = format_inventory(select_current(extraction.inventories, EventKind.INVENTORY))

    return CollectionExportResponse(
        cards=format_collection(collection, index),
        total_cards=collection.total_cards(),
        unique_cards=collection.unique_cards(),
        inventory=inventory,
        snapshots_found=len(extraction.collections),
    )


@router.post("", response_model=ApiResponse[CollectionExportResponse])
async def export_collection(
    mtgalogs: Annotated[UploadFile, File(description="Arena output_log.txt")],
    index: Annotated[CardIndex, Depends(get_card_index)],
) -> ApiResponse[CollectionExportResponse]:
    """
    Export the most recent collection in the uploaded log.

    Fails with a known failure if the log contains no collection.
    """
    stream = await read_log_upload(mtgalogs)
    result = await run_in_threadpool(_export, stream, index)
    return create_success(result)
