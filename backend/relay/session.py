from __future__ import annotations

import enum
import logging
import threading
import uuid
from typing import Optional

from .exceptions import TransportClosed
from .messages import WELCOME_LINE, ChatLine, GreetingLine, JoinNotice, LeaveNotice, is_quit_command
from .registry import SessionRegistry
from .transport import LineTransport

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Anonymous"


class SessionState(enum.Enum):
    CONNECTING = "connecting"
    ACTIVE = "active"
    CLOSED = "closed"


class ChatSession:
    """One connected client: its transport, display name and receive loop."""

    def __init__(
        self,
        transport: LineTransport,
        registry: SessionRegistry,
        session_id: Optional[str] = None,
        default_name: str = DEFAULT_NAME,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.name = default_name
        self._transport = transport
        self._registry = registry
        self._state = SessionState.CONNECTING
        self._state_lock = threading.Lock()
        self._announced = False

    @property
    def state(self) -> SessionState:
        return self._state

    def run(self) -> None:
        try:
            self._transport.write_line(WELCOME_LINE)
            candidate = self._transport.read_line()
            if candidate is not None and candidate.strip():
                self.name = candidate.strip()
            self._activate()

            self._transport.write_line(GreetingLine(self.name).render())
            self._registry.broadcast_except(JoinNotice(self.name).render(), self)
            self._announced = True

            while True:
                line = self._transport.read_line()
                if line is None:
                    logger.info("Session %s reached end of stream", self.session_id)
                    break
                if is_quit_command(line):
                    logger.info("Session %s (%s) sent quit", self.session_id, self.name)
                    break
                message = ChatLine(self.name, line).render()
                logger.info("%s", message)
                self._registry.broadcast_except(message, self)
        except (OSError, ValueError, TransportClosed) as exc:
            logger.warning("Session %s (%s) I/O error: %s", self.session_id, self.name, exc)
        finally:
            self._finish()

    def send(self, text: str) -> bool:
        # state check and write share the lock that _finish takes before unregistering
        with self._state_lock:
            if self._state is SessionState.CLOSED:
                return False
            try:
                self._transport.write_line(text)
                return True
            except (OSError, ValueError, TransportClosed) as exc:
                logger.debug("Delivery to session %s failed: %s", self.session_id, exc)
        self.close()
        return False

    def close(self) -> None:
        """Request a forced close; cleanup then runs on the session's own thread."""
        self._transport.shutdown()

    def _activate(self) -> None:
        with self._state_lock:
            self._state = SessionState.ACTIVE
            self._registry.register(self)
        logger.info("Session %s is active as %s", self.session_id, self.name)

    def _finish(self) -> None:
        with self._state_lock:
            if self._state is SessionState.CLOSED:
                return
            self._state = SessionState.CLOSED
        self._registry.unregister(self)
        if self._announced:
            self._registry.broadcast_except(LeaveNotice(self.name).render(), self)
        self._transport.close()
