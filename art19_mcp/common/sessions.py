from __future__ import annotations

import threading
import time
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

from .config import DEFAULT_MAX_SESSIONS, DEFAULT_SESSION_TTL


@dataclass
class SessionInfo:
    created_at: float
    last_seen: float


class SessionStore:
    """In-memory MCP session registry with sliding expiry and a capacity bound.

    ``ttl`` is in seconds; ``None`` or a value <= 0 keeps sessions until evicted.
    Expired sessions are dropped on lookup and whenever a new session is created.
    When ``max_sessions`` is reached the least recently seen session is dropped.
    """

    def __init__(
        self,
        ttl: Optional[float] = DEFAULT_SESSION_TTL,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl if ttl is not None and ttl > 0 else None
        self.max_sessions = max(1, max_sessions)
        self._clock = clock
        self._sessions: "OrderedDict[str, SessionInfo]" = OrderedDict()
        self._lock = threading.Lock()

    def create(self) -> str:
        session_id = str(uuid.uuid4())
        now = self._clock()
        with self._lock:
            self._purge_locked(now)
            while len(self._sessions) >= self.max_sessions:
                self._sessions.popitem(last=False)
            self._sessions[session_id] = SessionInfo(created_at=now, last_seen=now)
        return session_id

    def validate(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False
        now = self._clock()
        with self._lock:
            info = self._sessions.get(session_id)
            if info is None:
                return False
            if self._is_expired(info, now):
                del self._sessions[session_id]
                return False
            info.last_seen = now
            self._sessions.move_to_end(session_id)
            return True

    def expire(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            return self._purge_locked(now)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _purge_locked(self, now: float) -> int:
        if self.ttl is None:
            return 0
        stale = [sid for sid, info in self._sessions.items() if self._is_expired(info, now)]
        for sid in stale:
            del self._sessions[sid]
        return len(stale)

    def _is_expired(self, info: SessionInfo, now: float) -> bool:
        return self.ttl is not None and now - info.last_seen > self.ttl
