from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from syncwatch.core.clock import NANOS_PER_MILLI, MonotonicClock, SystemMonotonicClock
from syncwatch.models.player import MAX_SEEK_MS, PlaybackPhase, Snapshot
from syncwatch.ws.channel import LatestValueChannel, ObserverHandle

log = logging.getLogger("player.engine")


@dataclass
class ClockState:
    phase: PlaybackPhase = PlaybackPhase.PAUSED
    # leitura do relógio no último unpause/seek, só vale com phase == PLAYING
    anchor_ns: int = 0
    offset_ns: int = 0
    media_url: str = ""


class PlaybackEngine:
    """
    Relógio de reprodução compartilhado (padrão cronômetro).

    O tempo decorrido não é mantido por um timer: é derivado na leitura a
    partir de offset + (agora - anchor). Toda mutação roda sob o lock,
    sem I/O, e publica o snapshot resultante no canal.
    """

    def __init__(
        self,
        clock: Optional[MonotonicClock] = None,
        channel: Optional[LatestValueChannel] = None,
    ) -> None:
        self.clock = clock or SystemMonotonicClock()
        self._state = ClockState()
        self._lock = threading.Lock()
        self.channel = channel or LatestValueChannel(self._build_snapshot())

    # =====================================================
    # READ
    # =====================================================

    def current_timestamp_ns(self) -> int:
        with self._lock:
            return self._timestamp_ns()

    def current_timestamp_ms(self) -> int:
        return self.current_timestamp_ns() // NANOS_PER_MILLI

    @property
    def phase(self) -> PlaybackPhase:
        with self._lock:
            return self._state.phase

    @property
    def media_url(self) -> str:
        with self._lock:
            return self._state.media_url

    def snapshot(self) -> Snapshot:
        with self._lock:
            return self._build_snapshot()

    def subscribe(self) -> ObserverHandle:
        return self.channel.subscribe()

    # =====================================================
    # MUTATIONS
    # =====================================================

    def pause(self) -> None:
        with self._lock:
            if self._state.phase is PlaybackPhase.PAUSED:
                log.debug("player_pause_noop")
                return
            self._state.offset_ns += self.clock.now_ns() - self._state.anchor_ns
            self._state.phase = PlaybackPhase.PAUSED
            snapshot = self._emit()

        log.info("player_paused", extra=_fields(snapshot))

    def unpause(self) -> None:
        with self._lock:
            if self._state.phase is PlaybackPhase.PLAYING:
                log.debug("player_unpause_noop")
                return
            self._state.anchor_ns = self.clock.now_ns()
            self._state.phase = PlaybackPhase.PLAYING
            snapshot = self._emit()

        log.info("player_unpaused", extra=_fields(snapshot))

    def seek(self, target_ns: int) -> None:
        # phase fica como está: seek pausado continua pausado
        if target_ns < 0:
            raise ValueError(f"seek target must be >= 0, got {target_ns}")
        with self._lock:
            self._state.offset_ns = target_ns
            self._state.anchor_ns = self.clock.now_ns()
            snapshot = self._emit()

        log.info("player_seeked", extra=_fields(snapshot))

    def seek_millis(self, new_ts_ms: int) -> None:
        if not 0 <= new_ts_ms <= MAX_SEEK_MS:
            raise ValueError(f"seek must be within 0..{MAX_SEEK_MS} ms, got {new_ts_ms}")
        self.seek(new_ts_ms * NANOS_PER_MILLI)

    def change_media(self, new_url: str) -> None:
        # trocar mídia nunca dá autoplay
        with self._lock:
            self._state.media_url = new_url
            self._state.offset_ns = 0
            self._state.phase = PlaybackPhase.PAUSED
            snapshot = self._emit()

        log.info("player_media_changed", extra=_fields(snapshot))

    # =====================================================
    # HELPERS (chamar com o lock)
    # =====================================================

    def _timestamp_ns(self) -> int:
        if self._state.phase is PlaybackPhase.PLAYING:
            return self._state.offset_ns + (self.clock.now_ns() - self._state.anchor_ns)
        return self._state.offset_ns

    def _build_snapshot(self) -> Snapshot:
        return Snapshot(
            ts_millis=self._timestamp_ns() // NANOS_PER_MILLI,
            state=self._state.phase,
            media_url=self._state.media_url,
        )

    def _emit(self) -> Snapshot:
        # push dentro do lock mantém a ordem dos snapshots igual à das mutações
        snapshot = self._build_snapshot()
        self.channel.push(snapshot)
        return snapshot


def _fields(snapshot: Snapshot) -> dict:
    return {
        "ts_millis": snapshot.ts_millis,
        "state": snapshot.state.value,
        "media_url": snapshot.media_url,
    }
