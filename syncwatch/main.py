from __future__ import annotations

import argparse
import logging
from contextlib import asynccontextmanager
from typing import Optional, Sequence

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from syncwatch.core.config import Settings, get_settings
from syncwatch.core.logging import setup_logging
from syncwatch.services.player_engine import PlaybackEngine

from syncwatch.api.routes_ws import router as ws_router
from syncwatch.api.routes_player import router as player_router
from syncwatch.api.routes_status import router as status_router

log = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    log.info("app_starting", extra={"env": settings.app_env})

    # estado só em memória: todo restart volta pra Paused / 0 / ""
    app.state.engine = PlaybackEngine()
    log.info("engine_ready")

    try:
        yield
    finally:
        try:
            # acorda todos os viewers com CLOSED
            app.state.engine.channel.close()
        except Exception:
            log.exception("error_closing_channel")
        log.info("app_stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=None if settings.cors_origins else ".*",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ws_router)
    app.include_router(player_router)
    app.include_router(status_router)

    @app.get("/health")
    def health():
        return {
            "ok": True,
            "app": settings.app_name,
            "env": settings.app_env,
        }

    return app


app = create_app()


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Syncwatch backend")
    parser.add_argument("-a", "--admin-pw", help="admin password")
    parser.add_argument("--host", help="bind address")
    parser.add_argument("--port", type=int, help="bind port")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING...")
    args = parser.parse_args(argv)

    overrides = {
        key: value
        for key, value in vars(args).items()
        if value is not None
    }
    settings = get_settings().model_copy(update=overrides)

    # log_config=None: o setup_logging do lifespan é quem manda
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
