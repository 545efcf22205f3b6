# syncwatch/api/routes_player.py
from fastapi import APIRouter, Depends

from syncwatch.api.deps import get_engine, require_admin
from syncwatch.models.player import ChangeMediaRequest, SeekRequest
from syncwatch.services.player_engine import PlaybackEngine

router = APIRouter(tags=["player"], dependencies=[Depends(require_admin)])


# =====================================================
# PAUSE
# =====================================================
@router.post("/pause")
async def pause(engine: PlaybackEngine = Depends(get_engine)):
    engine.pause()
    return {"ok": True}


# =====================================================
# UNPAUSE
# =====================================================
@router.post("/unpause")
async def unpause(engine: PlaybackEngine = Depends(get_engine)):
    engine.unpause()
    return {"ok": True}


# =====================================================
# SEEK
# 👉 ms no fio, validado como uint32 pelo SeekRequest
# =====================================================
@router.post("/seek")
async def seek(body: SeekRequest, engine: PlaybackEngine = Depends(get_engine)):
    engine.seek_millis(body.new_ts_milliseconds)
    return {"ok": True}


# =====================================================
# CHANGE MEDIA
# 👉 sempre volta pra Paused no zero
# =====================================================
@router.post("/change_media")
async def change_media(body: ChangeMediaRequest, engine: PlaybackEngine = Depends(get_engine)):
    engine.change_media(body.new_url)
    return {"ok": True}
