"""
Pytest configuration and fixtures for backend tests.
"""
import os
import sys
import threading
from typing import List

import pytest

# Add backend directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class RecordingSession:
    """Stand-in registry member that records every line delivered to it."""

    def __init__(self, session_id: str, name: str = "Bob") -> None:
        self.session_id = session_id
        self.name = name
        self.received: List[str] = []
        self._lock = threading.Lock()

    def send(self, text: str) -> bool:
        with self._lock:
            self.received.append(text)
        return True


@pytest.fixture
def registry():
    from relay.registry import SessionRegistry

    return SessionRegistry()


@pytest.fixture
def recording_session_factory():
    return RecordingSession
