"""In-memory conversation sessions keyed by an opaque session id.

Sessions are created lazily, live for the lifetime of the process and are
never persisted. One lock guards the session map and every history
mutation, so concurrent appends to the same id are applied in lock order
and a question/answer pair recorded with ``record_exchange`` is never
interleaved with another request's turns.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Callable

from catalog_qa.models.entities import Role, Session, Turn
from catalog_qa.utils.time import now_ms

Clock = Callable[[], int]

MAX_HISTORY_READ = 100


@dataclass(slots=True, frozen=True)
class SessionSnapshot:
    id: str
    history_length: int
    created_at: int
    last_seen: int
    hit_count: int


class SessionStore:
    def __init__(self, clock: Clock = now_ms) -> None:
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def touch(self, session_id: str) -> Session:
        """Create the session if needed, bump ``last_seen`` and the hit counter."""
        with self._lock:
            now = self._clock()
            session = self._sessions.get(session_id)
            if session is None:
                session = Session(id=session_id, created_at=now, last_seen=now)
                self._sessions[session_id] = session
            else:
                session.last_seen = max(session.last_seen, now)
            session.hit_count += 1
            return _copy(session)

    def get(self, session_id: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(session_id)
            return _copy(session) if session is not None else None

    def append_turn(self, session_id: str, turn: Turn) -> Turn:
        """Append ``turn``; a timestamp older than the last turn is clamped to it."""
        with self._lock:
            return self._append(self._ensure(session_id), turn)

    def append_message(self, session_id: str, role: Role, content: str) -> Turn:
        return self.append_turn(session_id, Turn(role=role, content=content, timestamp=self._clock()))

    def record_exchange(self, session_id: str, question: str, answer: str) -> tuple[Turn, Turn]:
        """Append a user turn and its assistant reply as one atomic step."""
        with self._lock:
            session = self._ensure(session_id)
            now = self._clock()
            user = self._append(session, Turn(role="user", content=question, timestamp=now))
            assistant = self._append(session, Turn(role="assistant", content=answer, timestamp=now))
            return user, assistant

    def read(self, session_id: str, n: int = 20) -> list[Turn]:
        """Last ``n`` turns in order; ``n`` is clamped to ``[0, 100]``."""
        n = max(0, min(MAX_HISTORY_READ, int(n)))
        if n == 0:
            return []
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return []
            return list(session.history[-n:])

    def reset(self, session_id: str) -> Session:
        """Clear the history; ``created_at`` and ``hit_count`` are kept."""
        with self._lock:
            session = self._ensure(session_id)
            session.history = []
            return _copy(session)

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def snapshot(self, session_id: str) -> SessionSnapshot | None:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            return SessionSnapshot(
                id=session.id,
                history_length=len(session.history),
                created_at=session.created_at,
                last_seen=session.last_seen,
                hit_count=session.hit_count,
            )

    def _ensure(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            now = self._clock()
            session = Session(id=session_id, created_at=now, last_seen=now)
            self._sessions[session_id] = session
        return session

    @staticmethod
    def _append(session: Session, turn: Turn) -> Turn:
        if session.history and turn.timestamp < session.history[-1].timestamp:
            turn = replace(turn, timestamp=session.history[-1].timestamp)
        session.history.append(turn)
        return turn


def _copy(session: Session) -> Session:
    return replace(session, history=list(session.history))


__all__ = ["Clock", "MAX_HISTORY_READ", "SessionSnapshot", "SessionStore"]
