from __future__ import annotations

import asyncio
import logging
import threading
from enum import Enum
from typing import Optional

from syncwatch.models.player import Snapshot

log = logging.getLogger("player.channel")


class ChangeResult(str, Enum):
    CHANGED = "changed"
    TIMED_OUT = "timed_out"
    CLOSED = "closed"


class LatestValueChannel:
    """
    Guarda só o snapshot mais recente.

    - push sobrescreve, nunca enfileira
    - cada push acorda todos os observers esperando
    - observer lento vê apenas o último valor (coalescing)

    Observers esperam no event loop; push pode vir de qualquer thread.
    """

    def __init__(self, initial: Snapshot) -> None:
        self._value = initial
        self._version = 0
        self._closed = False
        self._changed = asyncio.Event()
        self._observers = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._mutex = threading.Lock()

    @property
    def version(self) -> int:
        return self._version

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def observers(self) -> int:
        return self._observers

    def current(self) -> Snapshot:
        return self._value

    def push(self, value: Snapshot) -> None:
        with self._mutex:
            if self._closed:
                log.debug("channel_push_after_close")
                return
            self._value = value
            self._version += 1
            fired = self._swap_event()
        self._wake(fired)

    def close(self) -> None:
        with self._mutex:
            if self._closed:
                return
            self._closed = True
            fired = self._swap_event()
        self._wake(fired)
        log.info("channel_closed", extra={"observers": self._observers})

    def subscribe(self) -> ObserverHandle:
        with self._mutex:
            self._observers += 1
            # valor atual já conta como visto: o primeiro wait bloqueia até o próximo push
            return ObserverHandle(self, self._version)

    def unsubscribe(self) -> None:
        with self._mutex:
            self._observers -= 1

    def change_event(self) -> asyncio.Event:
        """
        Event setado no próximo push/close. Chamar de dentro do event loop:
        o loop fica registrado pra push vindo de outra thread.
        """
        loop = asyncio.get_running_loop()
        with self._mutex:
            self._loop = loop
            return self._changed

    # =========================
    # INTERNAL
    # =========================

    def _swap_event(self) -> asyncio.Event:
        # troca o Event antes de setar, quem chegar depois espera o próximo push
        fired, self._changed = self._changed, asyncio.Event()
        return fired

    def _wake(self, fired: asyncio.Event) -> None:
        loop = self._loop
        if loop is None or loop.is_closed() or _running_loop() is loop:
            fired.set()
            return
        loop.call_soon_threadsafe(fired.set)


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class ObserverHandle:
    def __init__(self, channel: LatestValueChannel, seen_version: int) -> None:
        self._channel = channel
        self._seen_version = seen_version
        self._released = False

    def current(self) -> Snapshot:
        return self._channel.current()

    def has_changed(self) -> bool:
        return self._seen_version != self._channel.version

    async def await_change(self, timeout: float) -> ChangeResult:
        channel = self._channel
        # pega o Event antes de olhar a versão: push no meio do caminho
        # ou já aparece na versão, ou seta este Event
        event = channel.change_event()
        if channel.closed:
            return ChangeResult.CLOSED

        if not self.has_changed():
            try:
                await asyncio.wait_for(event.wait(), timeout)
            except asyncio.TimeoutError:
                return ChangeResult.TIMED_OUT
            if channel.closed:
                return ChangeResult.CLOSED

        self._seen_version = channel.version
        return ChangeResult.CHANGED

    def close(self) -> None:
        if self._released:
            return
        self._released = True
        self._channel.unsubscribe()

    def __enter__(self) -> ObserverHandle:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
