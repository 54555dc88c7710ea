class TransportClosed(Exception):
    """Raised when writing to a transport that has already been closed."""

    def __init__(self, message: str = "Transport already closed") -> None:
        super().__init__(message)


class DuplicateSessionError(Exception):
    """Raised when a session id is registered twice."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} is already registered")
        self.session_id = session_id
