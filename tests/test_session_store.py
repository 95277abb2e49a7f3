# tests/test_session_store.py

from __future__ import annotations

import os
from pathlib import Path

from taskdeck.session.session_store import SessionStore

from .fakes import ALICE


def test_empty_session(tmp_path: Path) -> None:
    store = SessionStore(tmp_path / "session.json")
    assert store.get_token() is None
    assert store.get_current_user() is None


def test_save_and_read_token_and_user(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "session.json"
    store = SessionStore(path)

    store.save_token("abc")
    store.save_user(ALICE)

    reopened = SessionStore(path)
    assert reopened.get_token() == "abc"
    assert reopened.get_current_user() == ALICE
    if os.name == "posix":
        assert (path.stat().st_mode & 0o777) == 0o600


def test_corrupt_file_means_no_session(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    path.write_text("{not json", "utf-8")
    store = SessionStore(path)

    assert store.get_token() is None
    assert store.get_current_user() is None


def test_malformed_user_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    path.write_text('{"token": "abc", "user": {"id": "u1"}}', "utf-8")
    store = SessionStore(path)

    assert store.get_token() == "abc"
    assert store.get_current_user() is None


def test_clear_removes_everything(tmp_path: Path) -> None:
    store = SessionStore(tmp_path / "session.json")
    store.save_token("abc")

    store.clear()
    store.clear()

    assert store.get_token() is None
    assert not store.path.exists()
