"""
Tests for settings loading and the auth session file.
"""

import json
import os
from pathlib import Path

import pytest

from courseplayer.classroom import AuthSession
from courseplayer.utils import load_settings
from courseplayer.utils.config import DEFAULT_API_URL, DEFAULT_SESSION_PATH


ENV_KEYS = [
    "COURSEPLAYER_API_URL",
    "COURSEPLAYER_SESSION_PATH",
    "COURSEPLAYER_TIMEOUT",
    "COURSEPLAYER_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # keep a stray .env in the working directory out of the picture
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestSettings:
    """Environment-driven settings."""

    def test_defaults(self, clean_env, tmp_path):
        settings = load_settings(tmp_path / "missing.env")
        assert settings.api_url == DEFAULT_API_URL
        assert settings.session_path == DEFAULT_SESSION_PATH
        assert settings.timeout == 30.0
        assert settings.log_level == "INFO"

    def test_environment_overrides(self, clean_env, tmp_path):
        clean_env.setenv("COURSEPLAYER_API_URL", "https://learn.example.test/api/")
        clean_env.setenv("COURSEPLAYER_SESSION_PATH", str(tmp_path / "s.json"))
        clean_env.setenv("COURSEPLAYER_TIMEOUT", "5")
        clean_env.setenv("COURSEPLAYER_LOG_LEVEL", "debug")

        settings = load_settings(tmp_path / "missing.env")

        assert settings.api_url == "https://learn.example.test/api"
        assert settings.session_path == tmp_path / "s.json"
        assert settings.timeout == 5.0
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("value", ["abc", "0", "-3"])
    def test_invalid_timeout_uses_default(self, clean_env, tmp_path, value):
        clean_env.setenv("COURSEPLAYER_TIMEOUT", value)
        settings = load_settings(tmp_path / "missing.env")
        assert settings.timeout == 30.0

    def test_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("COURSEPLAYER_API_URL=http://from-file.test/api\n", encoding="utf-8")
        try:
            settings = load_settings(env_file)
        finally:
            os.environ.pop("COURSEPLAYER_API_URL", None)
        assert settings.api_url == "http://from-file.test/api"


class TestAuthSession:
    """Token persistence."""

    def test_in_memory(self):
        session = AuthSession(token="abc")
        assert session.is_authenticated
        session.clear()
        assert not session.is_authenticated

    def test_sign_in_persists(self, tmp_path):
        path = tmp_path / "nested" / "session.json"
        AuthSession(path).sign_in("abc", {"name": "Grace"})

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {"authToken": "abc", "user": {"name": "Grace"}}
        assert AuthSession(path).token == "abc"

    def test_clear_removes_file(self, tmp_path):
        path = tmp_path / "session.json"
        session = AuthSession(path)
        session.sign_in("abc")
        session.clear()
        assert not path.exists()
        assert AuthSession(path).token is None

    def test_unreadable_file_ignored(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{broken", encoding="utf-8")
        assert not AuthSession(path).is_authenticated

    def test_suspended_user(self):
        assert AuthSession(token="abc", user={"accountStatus": "suspended"}).is_suspended
        assert not AuthSession(token="abc", user={"accountStatus": "active"}).is_suspended
        assert not AuthSession(token="abc").is_suspended

    def test_missing_path(self):
        assert AuthSession(Path("/nonexistent/dir/session.json")).token is None
