from __future__ import annotations

import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

from syncwatch.models.player import Snapshot
from syncwatch.services.player_engine import PlaybackEngine
from syncwatch.ws.channel import ChangeResult, ObserverHandle

log = logging.getLogger("ws.delivery")

HEARTBEAT_INTERVAL_S = 5.0

Sender = Callable[[str], Awaitable[None]]


class LoopState(str, Enum):
    INIT = "init"
    STREAMING = "streaming"
    TERMINATED = "terminated"


class DeliveryLoop:
    """
    Um por viewer conectado.

    INIT       -> assina o canal, manda o snapshot atual do engine
    STREAMING  -> espera mudança ou heartbeat, manda snapshot nos dois casos
    TERMINATED -> canal fechado ou envio falhou; libera o observer

    Falha de envio encerra só este loop, sem retry.
    """

    def __init__(
        self,
        engine: PlaybackEngine,
        send: Sender,
        heartbeat_s: float = HEARTBEAT_INTERVAL_S,
    ) -> None:
        self.engine = engine
        self.send = send
        self.heartbeat_s = heartbeat_s

        self.state = LoopState.INIT
        self.deliveries = 0
        self.heartbeats = 0

        self._observer: Optional[ObserverHandle] = None

    async def run(self) -> LoopState:
        try:
            while self.state is not LoopState.TERMINATED:
                if self.state is LoopState.INIT:
                    await self._on_init()
                else:
                    await self._on_streaming()
        finally:
            self.state = LoopState.TERMINATED
            if self._observer is not None:
                self._observer.close()
        return self.state

    async def _on_init(self) -> None:
        # assina antes de ler: mutação entre as duas chamadas vira CHANGED
        self._observer = self.engine.subscribe()
        ok = await self._deliver(self.engine.snapshot())
        self.state = LoopState.STREAMING if ok else LoopState.TERMINATED

    async def _on_streaming(self) -> None:
        assert self._observer is not None
        result = await self._observer.await_change(self.heartbeat_s)

        if result is ChangeResult.CLOSED:
            log.info("ws_channel_closed", extra={"deliveries": self.deliveries})
            self.state = LoopState.TERMINATED
            return

        if result is ChangeResult.TIMED_OUT:
            # heartbeat: pode repetir o último envio, o que importa é o tráfego
            self.heartbeats += 1

        if not await self._deliver(self._observer.current()):
            self.state = LoopState.TERMINATED

    async def _deliver(self, snapshot: Snapshot) -> bool:
        try:
            await self.send(snapshot.model_dump_json())
        except Exception as e:
            log.info("ws_observer_gone", extra={"error": repr(e), "deliveries": self.deliveries})
            return False
        self.deliveries += 1
        return True
