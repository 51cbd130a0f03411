"""Conversation state management."""
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Tuple
from pydantic import BaseModel

from app.services.ordering.models import ManualOrderDraft, ResolvedItem


class ConversationState(BaseModel):
    """A resolved manual order waiting for the customer's confirmation."""

    parsed: ManualOrderDraft
    resolved_items: List[ResolvedItem] = []

    @property
    def subtotal(self) -> float:
        return sum(item.line_total for item in self.resolved_items)


class ConversationStateStore(ABC):
    """Per-phone draft storage. One state per phone, last write wins."""

    @abstractmethod
    async def get(self, phone: str) -> Optional[ConversationState]:
        """Get the latest unexpired state for a phone number."""
        pass

    @abstractmethod
    async def put(self, phone: str, state: ConversationState) -> None:
        """Store a state, replacing any previous one."""
        pass

    @abstractmethod
    async def delete(self, phone: str) -> None:
        """Drop the state for a phone number."""
        pass


class InMemoryConversationStore(ConversationStateStore):
    """
    Process-local store with expiry.

    Drafts are lost on restart and are not shared between workers; a
    multi-instance deployment needs a shared implementation of
    ConversationStateStore.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._states: Dict[str, Tuple[float, ConversationState]] = {}

    def _purge(self, now: float) -> None:
        expired = [
            phone for phone, (stored_at, _) in self._states.items()
            if now - stored_at > self.ttl_seconds
        ]
        for phone in expired:
            del self._states[phone]

    async def get(self, phone: str) -> Optional[ConversationState]:
        self._purge(self.clock())
        entry = self._states.get(phone)
        return entry[1] if entry is not None else None

    async def put(self, phone: str, state: ConversationState) -> None:
        now = self.clock()
        self._purge(now)
        self._states[phone] = (now, state)

    async def delete(self, phone: str) -> None:
        self._states.pop(phone, None)

    def clear(self) -> None:
        self._states.clear()
