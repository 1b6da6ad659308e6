"""Last-selected keyword, remembered for 30 days to bias the next landing page."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from backend.engine.config import DAY_SECONDS
from backend.engine.ttl_store import TTLStore

logger = logging.getLogger(__name__)

SELECTION_KEY = "lastSelectedKeyword"
SELECTION_TTL = 30 * DAY_SECONDS


class LastSelectionMemory:
    """Advisory memory; ``store`` may be None where nothing can be persisted."""

    def __init__(
        self,
        store: Optional[TTLStore],
        ttl_seconds: int = SELECTION_TTL,
        key: str = SELECTION_KEY,
    ) -> None:
        self._store = store
        self._ttl = ttl_seconds
        self._key = key

    def record_selection(self, keyword: str) -> None:
        keyword = (keyword or "").strip()
        if not keyword or self._store is None:
            return
        try:
            self._store.set(self._key, keyword, self._ttl)
        except Exception as e:
            logger.warning("Failed to persist last selected keyword: %s", e)

    def read_selection(self) -> Optional[str]:
        if self._store is None:
            return None
        try:
            value = self._store.get(self._key)
        except Exception as e:
            logger.warning("Failed to read last selected keyword: %s", e)
            return None
        if not isinstance(value, str) or not value.strip():
            return None
        return value.strip()

    def read_valid_selection(self, known: Iterable[str]) -> Optional[str]:
        """The remembered keyword, only if it is still one of ``known``."""
        value = self.read_selection()
        if value is None:
            return None
        return value if value in set(known) else None

    def clear(self) -> None:
        if self._store is not None:
            self._store.delete(self._key)
