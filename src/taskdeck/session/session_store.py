# src/taskdeck/session/session_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from ..tasks.task_models import User

logger = logging.getLogger(__name__)


class SessionStore:
    """
    JSON-file session: {"token": "...", "user": {...}}.

    Reads are best-effort (a missing or corrupt file means "no session").
    Writes are atomic (tmp file + os.replace) and the file is kept private,
    since it holds a bearer token.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read session file %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)

    # ---- SessionReader ----

    def get_token(self) -> str | None:
        token = self._read().get("token")
        return token if isinstance(token, str) and token.strip() else None

    def get_current_user(self) -> User | None:
        raw = self._read().get("user")
        if not isinstance(raw, dict):
            return None
        try:
            return User.from_api(raw)
        except (KeyError, TypeError, ValueError):
            logger.warning("Stored user in %s is malformed; ignoring it", self._path)
            return None

    # ---- writers ----

    def save_token(self, token: str) -> None:
        data = self._read()
        data["token"] = token
        self._write(data)
        logger.info("Session token saved to %s", self._path)

    def save_user(self, user: User) -> None:
        data = self._read()
        data["user"] = user.to_api()
        self._write(data)

    def clear(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()
        logger.info("Session cleared (%s)", self._path)
