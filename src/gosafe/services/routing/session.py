"""Per-session bookkeeping so that stale routing responses are discarded."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from ...models.domain import RouteSelection

DEFAULT_SESSION = "default"


@dataclass(frozen=True, slots=True)
class PublishedRoute:
    sequence: int
    selection: RouteSelection


@dataclass(slots=True)
class _SessionState:
    sequence: int = 0
    published: PublishedRoute | None = None


class NavigationSessions:
    """Tracks the latest routing request and selection of each session.

    Every request takes a sequence number with ``begin``. ``publish`` only
    accepts the result of the newest request, so a slow response can never
    overwrite a fresher selection. Sequence numbers are unique across sessions,
    so a session dropped by ``cancel`` and begun again never reuses one.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sessions: dict[str, _SessionState] = {}
        self._counter = 0

    def begin(self, session_id: str = DEFAULT_SESSION) -> int:
        with self._lock:
            self._counter += 1
            state = self._sessions.setdefault(session_id, _SessionState())
            state.sequence = self._counter
            return state.sequence

    def is_current(self, session_id: str, sequence: int) -> bool:
        with self._lock:
            state = self._sessions.get(session_id)
            return state is not None and state.sequence == sequence

    def publish(self, session_id: str, sequence: int, selection: RouteSelection) -> bool:
        with self._lock:
            state = self._sessions.get(session_id)
            if state is None or state.sequence != sequence:
                return False
            state.published = PublishedRoute(sequence=sequence, selection=selection)
            return True

    def current(self, session_id: str = DEFAULT_SESSION) -> PublishedRoute | None:
        with self._lock:
            state = self._sessions.get(session_id)
            return state.published if state else None

    def cancel(self, session_id: str = DEFAULT_SESSION) -> bool:
        """Forget the session, invalidating its selection and any in-flight request."""
        with self._lock:
            state = self._sessions.pop(session_id, None)
            return state is not None and state.published is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
