import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket

from syncwatch.api.deps import get_app_settings_ws, get_engine_ws
from syncwatch.ws.delivery import DeliveryLoop

log = logging.getLogger("ws")

router = APIRouter()


async def _drain_incoming(websocket: WebSocket) -> None:
    # viewer não manda nada útil; ler aqui só serve pra perceber o close
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    engine=Depends(get_engine_ws),
    settings=Depends(get_app_settings_ws),
):
    await websocket.accept()
    log.info("ws_connected", extra={"observers": engine.channel.observers + 1})

    loop = DeliveryLoop(engine, websocket.send_text, heartbeat_s=settings.heartbeat_interval_s)
    delivery = asyncio.create_task(loop.run())
    listener = asyncio.create_task(_drain_incoming(websocket))

    try:
        done, _ = await asyncio.wait({delivery, listener}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (delivery, listener):
            task.cancel()
        await asyncio.gather(delivery, listener, return_exceptions=True)

    if engine.channel.closed and listener not in done:
        # shutdown: viewer ainda está lá, fecha com "going away"
        try:
            await websocket.close(code=1001)
        except Exception as e:
            log.debug("ws_close_failed", extra={"error": repr(e)})

    log.info(
        "ws_disconnected",
        extra={"deliveries": loop.deliveries, "heartbeats": loop.heartbeats},
    )
