# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskdeck.config import Settings


def test_settings_from_env_overrides_and_bad_values(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKDECK_API_BASE_URL", "https://tasks.example.com/")
    monkeypatch.setenv("TASKDECK_PAGE_SIZE", "not-a-number")
    monkeypatch.setenv("TASKDECK_READ_TIMEOUT_SECONDS", "5.5")
    monkeypatch.setenv("TASKDECK_CONSOLE_ENABLED", "off")
    monkeypatch.setenv("TASKDECK_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("TASKDECK_SESSION_PATH", raising=False)

    s = Settings.from_env()

    assert s.api_base_url == "https://tasks.example.com"
    assert s.page_size == 10
    assert s.read_timeout_seconds == 5.5
    assert s.console_enabled is False
    assert s.session_path == tmp_path / "session.json"
