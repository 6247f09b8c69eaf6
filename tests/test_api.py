"""Tests for the plugin and session REST endpoints."""

import base64
import time

import pytest
from fastapi.testclient import TestClient

from plugin_host.constants import ACK_DELAY_SECONDS
from plugin_host.dependencies import reset_services, set_plugin_manager


@pytest.fixture
def client(manager):
    reset_services()
    set_plugin_manager(manager)
    from app import app

    with TestClient(app) as test_client:
        yield test_client
    reset_services()


class TestPluginsApi:
    """Tests for /api/plugins."""

    def test_list_plugins(self, client):
        """All bundled plugins are listed as enabled built-ins."""
        response = client.get("/api/plugins/")

        assert response.status_code == 200
        plugins = response.json()["plugins"]
        assert [p["id"] for p in plugins] == ["timer", "todo", "openWebsite", "clock", "stopwatch"]
        assert all(p["builtin"] and p["enabled"] for p in plugins)

    def test_get_unknown_plugin(self, client):
        """Unknown plugin ids return 404."""
        assert client.get("/api/plugins/ghost").status_code == 404

    def test_disable_removes_declaration(self, client):
        """Disabling timer hides start_timer until it is enabled again."""
        response = client.post("/api/plugins/timer/disable")
        assert response.status_code == 200

        names = [d["name"] for d in client.get("/api/plugins/declarations").json()["functionDeclarations"]]
        assert "start_timer" not in names
        assert client.get("/api/plugins/timer").json()["enabled"] is False

        client.post("/api/plugins/timer/enable")
        names = [d["name"] for d in client.get("/api/plugins/declarations").json()["functionDeclarations"]]
        assert "start_timer" in names

    def test_enable_unknown_plugin(self, client):
        """Enabling an unknown plugin returns 404."""
        assert client.post("/api/plugins/ghost/enable").status_code == 404

    def test_delete_builtin_is_forbidden(self, client):
        """Deleting a built-in returns 403 and keeps it."""
        response = client.delete("/api/plugins/timer")

        assert response.status_code == 403
        assert client.get("/api/plugins/timer").status_code == 200

    def test_install_archive_and_uninstall(self, client):
        """An uploaded demo archive installs and can be deleted."""
        payload = {"filename": "notes.zip", "content_base64": base64.b64encode(b"PK\x03\x04").decode()}

        response = client.post("/api/plugins/install/archive", json=payload)

        assert response.status_code == 200
        assert response.json()["plugin"]["id"] == "notes"
        assert response.json()["plugin"]["version"] == "1.1.0"

        assert client.delete("/api/plugins/notes").status_code == 200
        assert client.get("/api/plugins/notes").status_code == 404

    def test_install_archive_rejects_bad_base64(self, client):
        """Invalid base64 content returns 400."""
        response = client.post("/api/plugins/install/archive", json={"filename": "a.zip", "content_base64": "!!!"})
        assert response.status_code == 400

    def test_install_unsupported_file(self, client):
        """Unsupported file types return 400."""
        response = client.post("/api/plugins/install/archive", json={"filename": "readme.txt"})
        assert response.status_code == 400

    def test_install_repository(self, client):
        """A repository URL installs a plugin attributed to its owner."""
        response = client.post("/api/plugins/install/repository", json={"url": "https://github.com/octo/weather-app"})

        assert response.status_code == 200
        assert response.json()["plugin"]["id"] == "weatherapp"
        assert response.json()["plugin"]["author"] == "octo"

    def test_install_invalid_repository(self, client):
        """Malformed repository URLs return 400."""
        response = client.post("/api/plugins/install/repository", json={"url": "https://github.com/octo"})
        assert response.status_code == 400

    def test_install_over_builtin_conflicts(self, client):
        """Installing a built-in id returns 409 and keeps the built-in."""
        response = client.post("/api/plugins/install/archive", json={"filename": "timer.zip"})

        assert response.status_code == 409
        assert client.get("/api/plugins/timer").json()["capability"] == "start_timer"

    def test_install_history(self, client):
        """Installed ids and attempts, including failures, are listed."""
        client.post("/api/plugins/install/archive", json={"filename": "foo.zip"})
        client.post("/api/plugins/install/archive", json={"filename": "readme.txt"})

        history = client.get("/api/plugins/installs").json()

        assert history["installed"] == ["foo"]
        assert [a["state"] for a in history["attempts"]] == ["registered", "failed"]

    def test_update_live_config(self, client):
        """PATCH /config changes the voice in the returned setup."""
        response = client.patch("/api/plugins/config", json={"voice_name": "Puck", "response_modality": "audio"})

        assert response.status_code == 200
        voice = response.json()["generationConfig"]["speechConfig"]["voiceConfig"]["prebuiltVoiceConfig"]
        assert voice["voiceName"] == "Puck"

    @pytest.mark.parametrize("body", [{}, {"response_modality": "video"}, {"model": "gemini"}])
    def test_invalid_live_config_update(self, client, body):
        """Empty or invalid config changes return 400."""
        assert client.patch("/api/plugins/config", json=body).status_code == 400

    def test_live_config(self, client):
        """The live config carries instruction and declarations."""
        config = client.get("/api/plugins/config").json()

        assert "systemInstruction" in config
        assert config["tools"][-1]["functionDeclarations"]


class TestSessionsApi:
    """Tests for /api/sessions."""

    def test_tool_call_is_acknowledged(self, client, manager):
        """A tool call runs the handler and is acknowledged after the delay."""
        created = client.post("/api/sessions/", json={"session_id": "s1"}).json()
        assert created["session"]["session_id"] == "s1"

        response = client.post(
            "/api/sessions/s1/tool-calls",
            json={"functionCalls": [{"name": "start_timer", "args": {"seconds": 60}, "id": "c1"}]},
        )

        assert response.status_code == 200
        assert response.json()["invocations"][0]["plugin_id"] == "timer"
        assert len(manager.registry.lookup("timer").handler.timers) == 1

        time.sleep(ACK_DELAY_SECONDS + 0.1)
        acks = client.get("/api/sessions/s1/responses").json()["functionResponses"]
        assert acks == [{"id": "c1", "response": {"output": {"success": True}, "excludeFromReadback": True}}]

    def test_closed_session_gets_no_acknowledgement(self, client):
        """A closed session can no longer be polled."""
        client.post("/api/sessions/", json={"session_id": "s2"})
        client.post("/api/sessions/s2/tool-calls", json={"functionCalls": [{"name": "start_timer", "id": "c1"}]})

        assert client.delete("/api/sessions/s2").status_code == 200
        assert client.get("/api/sessions/s2/responses").status_code == 404

    def test_unknown_session(self, client):
        """Tool calls for unknown sessions return 404."""
        response = client.post("/api/sessions/ghost/tool-calls", json={"functionCalls": []})
        assert response.status_code == 404
