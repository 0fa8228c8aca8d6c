# tests/test_health.py
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.config import settings


class TestHealth:
    def test_reports_database_and_secret_presence(self, anon_client, monkeypatch):
        monkeypatch.setattr(settings, "SESSION_SECRET_KEY", None)
        resp = anon_client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["database"] == "ok"
        assert data["env"]["SECRET_KEY"] == "exists"
        assert data["env"]["SESSION_SECRET_KEY"] == "missing"
        assert settings.SECRET_KEY not in resp.text
