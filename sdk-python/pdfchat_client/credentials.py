from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_ID_KEY = "user_id"


class CredentialStore(Protocol):
    """Synchronous key -> string map holding the session credentials."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryCredentialStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


def default_config_dir() -> Path:
    return Path(os.environ.get("PDFCHAT_CONFIG_DIR") or (Path.home() / ".config" / "pdfchat"))


class FileCredentialStore:
    """Credentials persisted as a JSON object in ``<config_dir>/credentials.json``.

    The file is re-read on every access so that several processes (or a
    logout from another shell) see the same state.
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self.config_dir = Path(config_dir) if config_dir else default_config_dir()

    @property
    def path(self) -> Path:
        return self.config_dir / "credentials.json"

    def _load(self) -> Dict[str, str]:
        p = self.path
        if not p.exists():
            return {}
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning(f"ignoring unreadable credentials file {p}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"ignoring credentials file {p}: expected a JSON object")
            return {}
        return data

    def _save(self, data: Dict[str, str]) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        del data[key]
        self._save(data)
