"""
Key-value storage for the dashboard.

Every key holds one string (its own JSON document). On disk the whole
store is a single JSON object ``{key: string}``. A store created without a
path lives in memory only, which is what the tests use.

Reading is forgiving: a missing, unreadable or corrupted file behaves as an
empty store. Writing raises ``OSError`` so the caller can report it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class KeyValueStore:
    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else None
        self._data: Dict[str, str] = self._read_file()

    def _read_file(self) -> Dict[str, str]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable store %s: %s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Ignoring store %s: top level is not an object", self.path)
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _flush(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = str(value)
        self._flush()

    def remove(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    def keys(self):
        return list(self._data.keys())


# -------------------------------
# JSON helpers
# -------------------------------

def load_json(store: KeyValueStore, key: str, default: Any) -> Any:
    """
    Decode the JSON stored under `key`. Missing or invalid -> `default`.
    """
    text = store.get(key)
    if text is None:
        return default
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning("Stored value for %r is not valid JSON (%s); using default", key, e)
        return default


def save_json(store: KeyValueStore, key: str, value: Any) -> None:
    store.set(key, json.dumps(value, ensure_ascii=False, default=str))
