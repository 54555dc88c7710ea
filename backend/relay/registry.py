from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Dict, Tuple

from .exceptions import DuplicateSessionError

if TYPE_CHECKING:
    from .session import ChatSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Thread-safe set of active chat sessions keyed by session id."""

    def __init__(self) -> None:
        self._sessions: Dict[str, ChatSession] = {}
        self._lock = threading.Lock()

    def register(self, session: ChatSession) -> None:
        with self._lock:
            if session.session_id in self._sessions:
                raise DuplicateSessionError(session.session_id)
            self._sessions[session.session_id] = session

    def unregister(self, session: ChatSession) -> None:
        with self._lock:
            if self._sessions.get(session.session_id) is session:
                del self._sessions[session.session_id]

    def broadcast_except(self, text: str, excluded: ChatSession) -> None:
        """Deliver ``text`` to every registered session other than ``excluded``.

        Recipients are snapshotted under the lock and written to outside of it.
        A recipient removed after the snapshot is skipped; a recipient whose
        write fails is left to notice its own broken transport.
        """
        with self._lock:
            recipients = [
                session
                for session_id, session in self._sessions.items()
                if session_id != excluded.session_id
            ]

        for recipient in recipients:
            if recipient not in self:
                logger.debug("Skipping session %s removed mid-broadcast", recipient.session_id)
                continue
            try:
                recipient.send(text)
            except Exception as exc:
                logger.debug("Delivery to session %s failed: %s", recipient.session_id, exc)

    def active_ids(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._sessions.keys())

    def __contains__(self, session: ChatSession) -> bool:
        with self._lock:
            return self._sessions.get(session.session_id) is session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
