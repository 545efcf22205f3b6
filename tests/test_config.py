"""
Tests for settings, logging setup and the command line entry point.
"""

import logging

from syncwatch.core.config import Settings
from syncwatch.core.logging import SafeExtraFormatter


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.admin_pw == "password"
    assert settings.port == 8080
    assert settings.heartbeat_interval_s == 5.0
    assert settings.cors_origins == []


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SYNCWATCH_ADMIN_PW", "s3cret")
    monkeypatch.setenv("SYNCWATCH_HEARTBEAT_INTERVAL_S", "2.5")
    settings = Settings(_env_file=None)
    assert settings.admin_pw == "s3cret"
    assert settings.heartbeat_interval_s == 2.5


class TestSafeExtraFormatter:

    def _format(self, **fields):
        formatter = SafeExtraFormatter(fmt="%(message)s | %(extra)s")
        record = logging.makeLogRecord({"msg": "player_paused", **fields})
        return formatter.format(record)

    def test_renders_extra_fields(self):
        assert self._format(ts_millis=120, state="Paused") == "player_paused | {'ts_millis': 120, 'state': 'Paused'}"

    def test_record_without_extra(self):
        assert self._format() == "player_paused | {}"


def test_cli_overrides_settings(monkeypatch):
    import syncwatch.main as main_module

    captured = {}

    def fake_run(app, **kwargs):
        captured["app"] = app
        captured.update(kwargs)

    monkeypatch.setattr(main_module.uvicorn, "run", fake_run)
    main_module.main(["-a", "letmein", "--port", "9001"])

    assert captured["port"] == 9001
    assert captured["app"].state.settings.admin_pw == "letmein"
