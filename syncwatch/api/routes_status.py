from __future__ import annotations

from fastapi import APIRouter, Depends

from syncwatch.api.deps import get_engine
from syncwatch.models.player import StatusResponse
from syncwatch.services.player_engine import PlaybackEngine

router = APIRouter(prefix="/status", tags=["status"])


@router.get("", response_model=StatusResponse)
async def get_status(engine: PlaybackEngine = Depends(get_engine)):
    return StatusResponse(snapshot=engine.snapshot(), observers=engine.channel.observers)
