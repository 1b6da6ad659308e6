"""Key-value stores with explicit expiry metadata.

Entries are kept as ``{"value", "timestamp", "expires_at"}`` with epoch
milliseconds. An entry is live only while ``now < expires_at``.
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol
from urllib.parse import quote, unquote

Clock = Callable[[], float]


def now_ms(clock: Clock) -> int:
    return int(clock() * 1000)


class TTLStore(Protocol):
    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...

    def delete(self, key: str) -> None: ...


def _make_entry(value: Any, ttl_seconds: int, clock: Clock) -> Dict[str, Any]:
    ts = now_ms(clock)
    return {"value": value, "timestamp": ts, "expires_at": ts + int(ttl_seconds * 1000)}


def _is_live(entry: Any, clock: Clock) -> bool:
    if not isinstance(entry, dict) or "expires_at" not in entry:
        return False
    return now_ms(clock) < entry["expires_at"]


class MemoryStore:
    """Process-local store; used in tests and when no cache file is wanted."""

    def __init__(self, clock: Clock = time.time) -> None:
        self._clock = clock
        self._entries: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if not _is_live(entry, self._clock):
            self._entries.pop(key, None)
            return None
        return entry["value"]

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        self._entries[key] = _make_entry(value, ttl_seconds, self._clock)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)


class JsonFileStore:
    """Store backed by a single JSON file.

    Reads tolerate a missing or corrupt file (treated as empty). Writes raise
    ``OSError`` on failure; callers decide whether that matters.
    """

    def __init__(self, path: Path, clock: Clock = time.time) -> None:
        self.path = Path(path)
        self._clock = clock

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )

    def get(self, key: str) -> Optional[Any]:
        entry = self._load().get(key)
        if not _is_live(entry, self._clock):
            return None
        return entry["value"]

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        data = self._load()
        data[key] = _make_entry(value, ttl_seconds, self._clock)
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class CookieStore:
    """Adapter over request cookies (reads) and a response (writes).

    Expiry is carried by the cookie's ``Max-Age``; the client drops it, so
    reads simply return whatever the request still carries.
    """

    def __init__(self, cookies: Dict[str, str], response: Any = None) -> None:
        self._cookies = dict(cookies or {})
        self._response = response

    def get(self, key: str) -> Optional[Any]:
        value = self._cookies.get(key)
        return unquote(value) if value else None

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        encoded = quote(str(value), safe="")
        self._cookies[key] = encoded
        if self._response is not None:
            self._response.set_cookie(
                key,
                encoded,
                max_age=int(ttl_seconds),
                path="/",
                samesite="lax",
                httponly=True,
            )

    def delete(self, key: str) -> None:
        self._cookies.pop(key, None)
        if self._response is not None:
            self._response.delete_cookie(key, path="/")
