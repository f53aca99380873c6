"""Export routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from deckport.api.config import Settings, get_settings
from deckport.dsl.schema import ExportMessage
from deckport.errors import ExportError
from deckport.exporter import ExportOptions, ExportOrchestrator
from deckport.scene import PillowRasterizer, SceneDocument, bind_document

logger = logging.getLogger(__name__)

router = APIRouter()


class ExportRequest(BaseModel):
    """Request to export part of a scene document."""
    document: SceneDocument
    selection: Optional[list[str]] = Field(
        default=None,
        description="Node ids to export, in order; defaults to the document's selection",
    )


@router.post("", response_model=ExportMessage)
async def export_document(
    request: ExportRequest,
    settings: Settings = Depends(get_settings),
) -> ExportMessage:
    """Export the selected root containers of a document."""
    document = bind_document(request.document)
    selected = document.selected_nodes(request.selection)

    orchestrator = ExportOrchestrator(
        PillowRasterizer(document.images),
        ExportOptions.from_settings(settings),
    )

    try:
        batch = await orchestrator.export_selection(selected)
    except ExportError as e:
        logger.info(f"Export of '{document.name}' rejected: {e.user_message}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.user_message,
        )

    return batch.to_message()
