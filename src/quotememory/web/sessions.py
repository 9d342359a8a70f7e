"""Practice session management for Web API.

Keeps the live MemorizationSession of each practice round, keyed by
session id and scoped to its owner. Sessions left unused for longer than
the idle limit are dropped when the next session is created.
"""

from __future__ import annotations

import asyncio
import time

import structlog

from quotememory.config.app_config import load_app_config
from quotememory.core.session_engine import MemorizationSession
from quotememory.db.store import QuoteStore, SqliteQuoteStore

logger = structlog.get_logger(__name__)


class PracticeSessionManager:
    """Registry of active practice sessions.

    Sessions never share state; the lock only guards the registry.
    """

    def __init__(
        self,
        store: QuoteStore | None = None,
        memorize_seconds: int | None = None,
        tick_seconds: float | None = None,
        idle_seconds: float | None = None,
    ):
        self._store = store or SqliteQuoteStore()
        self._memorize_seconds = memorize_seconds
        self._tick_seconds = tick_seconds
        if idle_seconds is None:
            idle_seconds = load_app_config().practice.session_idle_seconds
        self._idle_seconds = idle_seconds
        self._sessions: dict[str, MemorizationSession] = {}
        self._last_used: dict[str, float] = {}
        self._lock = asyncio.Lock()

    @property
    def store(self) -> QuoteStore:
        return self._store

    async def create_session(self, owner_id: str) -> MemorizationSession:
        """Create a practice session and load the owner's quotes.

        Args:
            owner_id: User the session belongs to

        Returns:
            The created session, in the Selecting phase
        """
        session = MemorizationSession(
            owner_id=owner_id,
            store=self._store,
            memorize_seconds=self._memorize_seconds,
            tick_seconds=self._tick_seconds,
        )
        session.load_quotes()

        async with self._lock:
            expired = self._pop_idle(time.monotonic())
            self._sessions[session.session_id] = session
            self._last_used[session.session_id] = time.monotonic()

        for old in expired:
            old.close()
        if expired:
            logger.info("practice_sessions_expired", count=len(expired))

        logger.info(
            "practice_session_created",
            session_id=session.session_id,
            owner_id=owner_id,
            quotes=len(session.quotes),
        )
        return session

    async def get_session(self, session_id: str, owner_id: str) -> MemorizationSession | None:
        """Get a session by ID. Sessions of other owners are not visible."""
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None or session.owner_id != owner_id:
                return None
            self._last_used[session_id] = time.monotonic()
        return session

    async def end_session(self, session_id: str, owner_id: str) -> bool:
        """End a session and stop its countdown.

        Returns:
            True if session was ended, False if not found
        """
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None or session.owner_id != owner_id:
                return False
            del self._sessions[session_id]
            self._last_used.pop(session_id, None)

        session.close()
        logger.info("practice_session_ended", session_id=session_id)
        return True

    async def close_all(self) -> None:
        """End every session (application shutdown)."""
        async with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
            self._last_used.clear()

        for session in sessions:
            session.close()

    async def get_session_count(self) -> int:
        """Get count of active sessions."""
        async with self._lock:
            return len(self._sessions)

    def _pop_idle(self, now: float) -> list[MemorizationSession]:
        # Caller holds the lock
        stale = [
            sid for sid, used in self._last_used.items()
            if now - used > self._idle_seconds
        ]
        for sid in stale:
            del self._last_used[sid]
        return [self._sessions.pop(sid) for sid in stale]


# Global session manager instance
_session_manager: PracticeSessionManager | None = None


def get_session_manager() -> PracticeSessionManager:
    """Get the global session manager instance."""
    global _session_manager
    if _session_manager is None:
        _session_manager = PracticeSessionManager()
    return _session_manager


def set_session_manager(manager: PracticeSessionManager) -> None:
    """Install a session manager (for testing)."""
    global _session_manager
    _session_manager = manager


def reset_session_manager() -> None:
    """Reset the session manager (for testing)."""
    global _session_manager
    _session_manager = None
