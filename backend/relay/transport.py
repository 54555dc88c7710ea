from __future__ import annotations

import logging
import socket
import threading
from typing import BinaryIO, Optional

from .exceptions import TransportClosed

logger = logging.getLogger(__name__)


class LineTransport:
    """Newline-framed text view over one accepted socket.

    Reads happen only on the owning session's thread. Writes may come from any
    thread and are serialized by an internal lock, which also orders them against
    ``close()`` so a write never touches a released stream.
    """

    def __init__(
        self,
        connection: socket.socket,
        rfile: BinaryIO,
        wfile: BinaryIO,
        encoding: str = "utf-8",
    ) -> None:
        self._connection = connection
        self._rfile = rfile
        self._wfile = wfile
        self._encoding = encoding
        self._write_lock = threading.Lock()
        self._closed = False

    @classmethod
    def from_socket(cls, connection: socket.socket, encoding: str = "utf-8") -> "LineTransport":
        return cls(connection, connection.makefile("rb"), connection.makefile("wb"), encoding)

    def read_line(self) -> Optional[str]:
        """Return the next line without its terminator, or None at end of stream."""
        raw = self._rfile.readline()
        if not raw:
            return None
        return raw.decode(self._encoding, errors="replace").rstrip("\r\n")

    def write_line(self, text: str) -> None:
        payload = (text + "\n").encode(self._encoding)
        with self._write_lock:
            if self._closed:
                raise TransportClosed()
            self._wfile.write(payload)
            self._wfile.flush()

    def shutdown(self) -> None:
        """Unblock a pending read. Safe to call from any thread, any number of times."""
        try:
            self._connection.shutdown(socket.SHUT_RDWR)
        except OSError as exc:
            # peer already gone or socket already released
            logger.debug("Socket shutdown skipped: %s", exc)

    def close(self) -> None:
        with self._write_lock:
            if self._closed:
                return
            self._closed = True
        self.shutdown()
        for stream in (self._wfile, self._rfile):
            try:
                stream.close()
            except (OSError, ValueError) as exc:
                logger.debug("Stream close failed: %s", exc)
        self._connection.close()
