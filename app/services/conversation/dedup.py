"""Inbound message de-duplication."""
import time
from typing import Callable, Dict, Optional


class InMemoryMessageDeduplicator:
    """Remembers provider message ids for a while so redeliveries are skipped."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._seen: Dict[str, float] = {}

    def _purge(self, now: float) -> None:
        expired = [mid for mid, seen_at in self._seen.items() if now - seen_at > self.ttl_seconds]
        for message_id in expired:
            del self._seen[message_id]

    def seen_before(self, message_id: Optional[str]) -> bool:
        """
        Mark a message id as processed.

        Returns True when the id was already marked inside the TTL window.
        Messages without an id are never treated as duplicates.
        """
        if not message_id:
            return False
        now = self.clock()
        self._purge(now)
        if message_id in self._seen:
            return True
        self._seen[message_id] = now
        return False

    def clear(self) -> None:
        self._seen.clear()
