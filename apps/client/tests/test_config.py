from __future__ import annotations

import pytest

from notekeep_client.config import load_settings
from notekeep_client.dependencies import create_context, get_settings
from notekeep_client.domain.entities import Identity
from notekeep_client.session.storage import FileStorage


class AcceptingAuth:
    def login(self, email: str, password: str) -> Identity:
        return Identity(id=email, email=email)

    def register(self, username: str, full_name: str, email: str, password: str) -> Identity:
        return Identity(id=email, email=email, username=username, full_name=full_name)


@pytest.fixture(autouse=True)
def clear_dependency_caches():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults(monkeypatch) -> None:
    for name in (
        "NOTEKEEP_API_BASE_URL",
        "NOTEKEEP_STORAGE_DIR",
        "NOTEKEEP_SESSION_KEY",
        "NOTEKEEP_HTTP_TIMEOUT_S",
        "NOTEKEEP_WATCH_STORAGE",
        "NOTEKEEP_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()
    assert settings.api_base_url == "http://localhost:8080"
    assert settings.storage_dir.name == ".notekeep"
    assert settings.storage_dir.is_absolute()
    assert settings.session_key == "user"
    assert settings.http_timeout_s == 30.0
    assert settings.watch_storage is True
    assert settings.log_level == "INFO"


def test_environment_overrides(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("NOTEKEEP_API_BASE_URL", "https://notes.example.com")
    monkeypatch.setenv("NOTEKEEP_STORAGE_DIR", str(tmp_path))
    monkeypatch.setenv("NOTEKEEP_SESSION_KEY", "session")
    monkeypatch.setenv("NOTEKEEP_HTTP_TIMEOUT_S", "2.5")
    monkeypatch.setenv("NOTEKEEP_WATCH_STORAGE", "False")

    settings = load_settings()
    assert settings.api_base_url == "https://notes.example.com"
    assert settings.storage_dir == tmp_path.resolve()
    assert settings.session_key == "session"
    assert settings.http_timeout_s == 2.5
    assert settings.watch_storage is False


def test_create_context_wires_file_storage_and_http(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("NOTEKEEP_API_BASE_URL", "https://notes.example.com")
    monkeypatch.setenv("NOTEKEEP_STORAGE_DIR", str(tmp_path))
    monkeypatch.setenv("NOTEKEEP_SESSION_KEY", "session")
    monkeypatch.setenv("NOTEKEEP_WATCH_STORAGE", "false")

    ctx = create_context()
    try:
        assert isinstance(ctx.storage, FileStorage)
        assert ctx.session.key == "session"
        assert ctx.http_client is not None
        assert ctx.http_client.base_url.host == "notes.example.com"
        assert ctx.session.is_authenticated() is False
    finally:
        ctx.close()


def test_contexts_from_the_factory_follow_each_other(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("NOTEKEEP_STORAGE_DIR", str(tmp_path))
    monkeypatch.setenv("NOTEKEEP_WATCH_STORAGE", "false")

    first = create_context()
    second = create_context()
    try:
        assert first.storage is not second.storage
        first.session.auth = AcceptingAuth()

        first.session.login("ada@example.com", "pw")
        second.storage.poll()
        assert second.session.is_authenticated() is True

        first.session.logout()
        second.storage.poll()
        assert second.session.is_authenticated() is False
    finally:
        first.close()
        second.close()
