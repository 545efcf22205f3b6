from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# seek chega do frontend como uint32 em milissegundos
MAX_SEEK_MS = 2**32 - 1


class PlaybackPhase(str, Enum):
    PLAYING = "Playing"
    PAUSED = "Paused"


class Snapshot(BaseModel):
    """
    Observação imutável do player num instante.

    Formato no fio:
        {"ts_millis": 0, "state": "Paused", "media_url": ""}
    """

    model_config = ConfigDict(frozen=True)

    ts_millis: int = Field(ge=0)
    state: PlaybackPhase
    media_url: str


class ChangeMediaRequest(BaseModel):
    new_url: str


class SeekRequest(BaseModel):
    new_ts_milliseconds: int = Field(ge=0, le=MAX_SEEK_MS)


class StatusResponse(BaseModel):
    snapshot: Snapshot
    observers: int
