"""
In-memory, session-keyed store of chat conversation state
"""
import threading
import time
from collections import OrderedDict
from typing import Callable, Optional

from virtual_doctor.core.config import get_settings
from virtual_doctor.core.logging_config import LoggingConfig
from virtual_doctor.core.metrics import chat_replies_total, chat_sessions_active
from virtual_doctor.core.response_engine import (ConversationState,
                                                 EngineResult, ResponseEngine)

logger = LoggingConfig.get_logger(__name__)


class _Slot:
    """One conversation: its state plus the lock that serializes its turns"""

    __slots__ = ("state", "lock", "last_access")

    def __init__(self, state: ConversationState, now: float):
        self.state = state
        self.lock = threading.Lock()
        self.last_access = now


class ConversationStore:
    """
    Holds one ConversationState per session id.

    Turns for the same session run one at a time under that session's lock;
    different sessions never touch each other's state. The store lock only
    guards the session map itself.

    The map is kept in least-recently-used order. Once it holds
    ``max_sessions`` conversations, starting a new one evicts the oldest.
    """

    def __init__(
        self,
        engine: Optional[ResponseEngine] = None,
        ttl_seconds: Optional[float] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_sessions is not None and max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.engine = engine or ResponseEngine()
        self.ttl_seconds = ttl_seconds or None
        self.max_sessions = max_sessions
        self._clock = clock
        self._lock = threading.Lock()
        self._slots: "OrderedDict[str, _Slot]" = OrderedDict()

    def submit(self, session_id: str, message: str) -> EngineResult:
        """Run one conversational turn for a session and remember the new state"""
        slot = self._get_slot(session_id)
        with slot.lock:
            result = self.engine.respond(slot.state, message)
            slot.state = result.state

        chat_replies_total.labels(intent=result.intent.value).inc()
        logger.debug(
            "Chat turn handled",
            extra={"session_id": session_id, "intent": result.intent.value, "keyword": result.keyword},
        )
        return result

    def get_state(self, session_id: str) -> Optional[ConversationState]:
        """Current state of a session, or None if it has no conversation"""
        with self._lock:
            slot = self._slots.get(session_id)
        if slot is None:
            return None
        with slot.lock:
            return slot.state

    def discard(self, session_id: str) -> bool:
        """End a conversation; the next message for this session is greeted again"""
        with self._lock:
            removed = self._slots.pop(session_id, None) is not None
            chat_sessions_active.set(len(self._slots))
        if removed:
            logger.info("Conversation ended", extra={"session_id": session_id})
        return removed

    def purge_expired(self) -> int:
        """Forget conversations idle for longer than the TTL"""
        if not self.ttl_seconds:
            return 0
        with self._lock:
            return self._purge_expired_locked()

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def _get_slot(self, session_id: str) -> _Slot:
        with self._lock:
            now = self._clock()
            if self.ttl_seconds:
                self._purge_expired_locked()

            slot = self._slots.get(session_id)
            if slot is None:
                if self.max_sessions and len(self._slots) >= self.max_sessions:
                    evicted, _ = self._slots.popitem(last=False)
                    logger.info(
                        "Conversation evicted, store is full",
                        extra={"session_id": evicted, "max_sessions": self.max_sessions},
                    )
                slot = _Slot(self.engine.new_state(), now)
                self._slots[session_id] = slot
                chat_sessions_active.set(len(self._slots))
            else:
                slot.last_access = now
                self._slots.move_to_end(session_id)
            return slot

    def _purge_expired_locked(self) -> int:
        # Oldest access first, so the scan stops at the first live slot
        cutoff = self._clock() - self.ttl_seconds
        purged = 0
        while self._slots:
            session_id, slot = next(iter(self._slots.items()))
            if slot.last_access >= cutoff:
                break
            del self._slots[session_id]
            purged += 1
        if purged:
            chat_sessions_active.set(len(self._slots))
            logger.info(f"Purged {purged} idle conversations")
        return purged


_store: Optional[ConversationStore] = None
_store_lock = threading.Lock()


def get_conversation_store() -> ConversationStore:
    """Get global conversation store instance"""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                settings = get_settings()
                _store = ConversationStore(
                    ttl_seconds=settings.chat_session_ttl_minutes * 60,
                    max_sessions=settings.chat_max_sessions,
                )
    return _store
