"""
Thread-safe in-memory storage with expiry.

Holds the ephemeral per-user state of the service (queued questions, game
sessions). Nothing is persisted; entries vanish on restart or once they have gone
unused for longer than the timeout.
"""

import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Generic, List, Optional, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionEntry(Generic[T]):
    session_id: str
    value: T
    created_at: datetime
    last_accessed: datetime


class SessionStore(Generic[T]):
    def __init__(self, session_timeout_minutes: int = 60):
        self._sessions: Dict[str, SessionEntry[T]] = {}
        self._lock = threading.Lock()
        self.session_timeout = timedelta(minutes=session_timeout_minutes)

    def create(self, value: T, session_id: Optional[str] = None) -> str:
        session_id = session_id or str(uuid.uuid4())
        now = utcnow()
        with self._lock:
            self._cleanup_expired_sessions()
            self._sessions[session_id] = SessionEntry(session_id, value, now, now)
        return session_id

    def get(self, session_id: str) -> Optional[T]:
        with self._lock:
            entry = self._live_entry(session_id)
            return entry.value if entry else None

    def update(self, session_id: str, **changes: Any) -> Optional[T]:
        """Set attributes on a stored value atomically; None if it is gone."""
        with self._lock:
            entry = self._live_entry(session_id)
            if entry is None:
                return None
            for name, value in changes.items():
                setattr(entry.value, name, value)
            return entry.value

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def values(self) -> List[T]:
        """Live values, oldest first."""
        with self._lock:
            self._cleanup_expired_sessions()
            entries = sorted(self._sessions.values(), key=lambda e: e.created_at)
            return [entry.value for entry in entries]

    def _live_entry(self, session_id: str) -> Optional[SessionEntry[T]]:
        # caller holds the lock
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        now = utcnow()
        if now - entry.last_accessed > self.session_timeout:
            del self._sessions[session_id]
            return None
        entry.last_accessed = now
        return entry

    def _cleanup_expired_sessions(self):
        # caller holds the lock
        now = utcnow()
        expired_ids = [
            session_id for session_id, entry in self._sessions.items()
            if now - entry.last_accessed > self.session_timeout
        ]
        for session_id in expired_ids:
            del self._sessions[session_id]
        if expired_ids:
            logger.info(f"Cleaned up {len(expired_ids)} expired sessions")

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            now = utcnow()
            return {
                "active_sessions": len(self._sessions),
                "timeout_minutes": self.session_timeout.total_seconds() / 60,
                "oldest_session_age": (
                    max((now - entry.created_at).total_seconds() for entry in self._sessions.values())
                    if self._sessions else 0
                ),
            }
