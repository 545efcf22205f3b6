from __future__ import annotations

import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, Request, WebSocket

from syncwatch.core.config import Settings
from syncwatch.services.player_engine import PlaybackEngine

log = logging.getLogger("api.auth")


# =========================
# SETTINGS
# =========================

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_app_settings_ws(websocket: WebSocket) -> Settings:
    return websocket.app.state.settings


# =========================
# ENGINE (HTTP)
# =========================

def get_engine(request: Request) -> PlaybackEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=500, detail="Engine not initialized")
    return engine


# =========================
# ENGINE (WEBSOCKET)
# =========================

def get_engine_ws(websocket: WebSocket) -> PlaybackEngine:
    return websocket.app.state.engine


# =========================
# ADMIN
# =========================

async def require_admin(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> None:
    """
    O frontend manda a senha de admin crua no header Authorization.
    """
    expected = request.app.state.settings.admin_pw
    if authorization is None or not secrets.compare_digest(
        authorization.encode("utf-8"), expected.encode("utf-8")
    ):
        log.warning(
            "admin_auth_rejected",
            extra={
                "path": request.url.path,
                "client": request.client.host if request.client else None,
            },
        )
        raise HTTPException(status_code=401, detail="Unauthorized")
