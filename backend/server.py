from __future__ import annotations

import logging
import socketserver
import threading
from typing import Optional, Sequence, Set

from configs import Configs
from relay.registry import SessionRegistry
from relay.session import ChatSession
from relay.transport import LineTransport

logger = logging.getLogger(__name__)


class ChatRelayServer(socketserver.ThreadingMixIn, socketserver.TCPServer):
    daemon_threads = True
    allow_reuse_address = True
    request_queue_size = 128

    def __init__(self, server_address, configs: Optional[Configs] = None, registry: Optional[SessionRegistry] = None) -> None:
        self.configs = configs or Configs()
        self.registry = registry or SessionRegistry()
        self._open_sessions: Set[ChatSession] = set()
        self._open_lock = threading.Lock()
        super().__init__(server_address, ChatRequestHandler)

    def track(self, session: ChatSession) -> None:
        with self._open_lock:
            self._open_sessions.add(session)

    def untrack(self, session: ChatSession) -> None:
        with self._open_lock:
            self._open_sessions.discard(session)

    def close_all_sessions(self) -> None:
        with self._open_lock:
            sessions = list(self._open_sessions)
        logger.info("Closing %d open session(s)", len(sessions))
        for session in sessions:
            session.close()

    def get_request(self):
        try:
            return super().get_request()
        except OSError as exc:
            logger.warning("Failed to accept connection: %s", exc)
            raise

    def handle_error(self, request, client_address) -> None:
        logger.error("Unhandled error for client %s", client_address, exc_info=True)


class ChatRequestHandler(socketserver.StreamRequestHandler):
    server: ChatRelayServer

    def handle(self) -> None:
        logger.info("Client connected: %s", self.client_address)
        configs = self.server.configs
        transport = LineTransport(self.connection, self.rfile, self.wfile, encoding=configs.encoding)
        session = ChatSession(transport, self.server.registry, default_name=configs.default_name)
        self.server.track(session)
        try:
            session.run()
        finally:
            self.server.untrack(session)
            logger.info(
                "Client disconnected: %s (%d online)",
                session.name,
                len(self.server.registry),
            )


def start_server(configs: Configs) -> None:
    logger.info("Starting chat relay on port %s", configs.port)
    try:
        server = ChatRelayServer(configs.address, configs)
    except OSError as exc:
        logger.critical("Failed to bind port %s: %s", configs.port, exc)
        raise SystemExit(1)
    logger.info("Chat relay is listening on %s", server.server_address[1])
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down chat relay")
    finally:
        server.close_all_sessions()
        server.server_close()


def main(argv: Optional[Sequence[str]] = None) -> None:
    configs = Configs.from_args(argv)
    logging.basicConfig(
        level=configs.log_level,
        format="[%(asctime)s] [%(levelname)s] %(message)s",
    )
    start_server(configs)


if __name__ == "__main__":
    main()
