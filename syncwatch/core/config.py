from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SYNCWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # app
    app_name: str = "Syncwatch Backend"
    app_env: str = "dev"
    log_level: str = "INFO"

    # http
    host: str = "0.0.0.0"
    port: int = 8080

    # senha enviada crua no header Authorization
    admin_pw: str = "password"

    # ws
    heartbeat_interval_s: float = 5.0

    # vazio = reflete qualquer Origin (com credentials)
    cors_origins: List[str] = []


@lru_cache
def get_settings() -> Settings:
    return Settings()

