"""Process-lifetime license verification cache with TTL.

key ("{product_id}:{license_key}") → (value, stored_at) 매핑.
Entries expire lazily on read; nothing is persisted across restarts.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


def cache_key(product_id: str, license_key: str) -> str:
    return f"{product_id}:{license_key}"


class LicenseCache:
    """In-memory TTL cache for license verdicts.

    Shared by all requests without locking: values are immutable once
    stored and a concurrent overwrite simply replaces the entry.

    Args:
        ttl_seconds: 최대 보관 시간 (초). age > ttl이면 만료.
        clock: 현재 시각 함수 (테스트용 주입).
    """

    def __init__(
        self,
        ttl_seconds: float = 600,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        """캐시 조회. 만료됐으면 삭제 후 None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self._clock() - stored_at > self.ttl_seconds:
            logger.debug("License cache entry expired")
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        """저장 (기존 항목 덮어쓰기)."""
        self._entries[key] = (value, self._clock())

    def now(self) -> float:
        return self._clock()

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
