"""
Tests for the HTTP and WebSocket surface.
"""

from fastapi.testclient import TestClient

from syncwatch.main import create_app


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["ok"] is True


class TestAdminAuth:

    def test_missing_header_is_rejected(self, client):
        response = client.post("/pause")
        assert response.status_code == 401
        assert response.json() == {"detail": "Unauthorized"}

    def test_wrong_password_is_rejected(self, client):
        response = client.post("/change_media", json={"new_url": "x.mp4"}, headers={"Authorization": "nope"})
        assert response.status_code == 401
        assert client.get("/status").json()["snapshot"]["media_url"] == ""

    def test_status_is_public(self, client):
        assert client.get("/status").status_code == 200


class TestPlayerRoutes:

    def test_change_media(self, client, auth):
        response = client.post("/change_media", json={"new_url": "a.mp4"}, headers=auth)
        assert response.status_code == 200
        assert response.json() == {"ok": True}

        snapshot = client.get("/status").json()["snapshot"]
        assert snapshot == {"ts_millis": 0, "state": "Paused", "media_url": "a.mp4"}

    def test_unpause_and_pause(self, client, auth):
        assert client.post("/unpause", headers=auth).status_code == 200
        assert client.get("/status").json()["snapshot"]["state"] == "Playing"

        assert client.post("/pause", headers=auth).status_code == 200
        assert client.get("/status").json()["snapshot"]["state"] == "Paused"

    def test_seek_in_milliseconds(self, client, auth):
        response = client.post("/seek", json={"new_ts_milliseconds": 90_500}, headers=auth)
        assert response.status_code == 200
        assert client.get("/status").json()["snapshot"]["ts_millis"] == 90_500

    def test_seek_rejects_non_uint32(self, client, auth):
        for bad in (-1, 2**32):
            response = client.post("/seek", json={"new_ts_milliseconds": bad}, headers=auth)
            assert response.status_code == 422

    def test_change_media_requires_url(self, client, auth):
        response = client.post("/change_media", json={}, headers=auth)
        assert response.status_code == 422


class TestWebSocket:

    def test_initial_snapshot_then_changes(self, client, auth):
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_json() == {"ts_millis": 0, "state": "Paused", "media_url": ""}
            assert client.get("/status").json()["observers"] == 1

            client.post("/change_media", json={"new_url": "a.mp4"}, headers=auth)
            assert ws.receive_json() == {"ts_millis": 0, "state": "Paused", "media_url": "a.mp4"}

            client.post("/seek", json={"new_ts_milliseconds": 2000}, headers=auth)
            assert ws.receive_json()["ts_millis"] == 2000

    def test_viewers_each_get_updates(self, client, auth):
        with client.websocket_connect("/ws") as first, client.websocket_connect("/ws") as second:
            first.receive_json()
            second.receive_json()

            client.post("/unpause", headers=auth)
            assert first.receive_json()["state"] == "Playing"
            assert second.receive_json()["state"] == "Playing"

    def test_heartbeat_keeps_idle_connection_fed(self, make_settings):
        app = create_app(make_settings(heartbeat_interval_s=0.05))
        with TestClient(app) as client:
            with client.websocket_connect("/ws") as ws:
                first = ws.receive_json()
                assert ws.receive_json() == first
                assert ws.receive_json() == first

    def test_cors_reflects_origin(self, client):
        response = client.options(
            "/pause",
            headers={
                "Origin": "http://viewer.example",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.headers["access-control-allow-origin"] == "http://viewer.example"
        assert response.headers["access-control-allow-credentials"] == "true"
