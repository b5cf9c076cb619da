"""
Shared fixtures for sqldump tests.
"""

from unittest import mock

import pytest

from sqldump.connection import DatabaseConnection


class MemorySink:
    """In-memory sink recording everything written to it."""

    def __init__(self):
        self.path = None
        self.chunks: list[str] = []
        self.closed = False

    def open(self, path: str) -> None:
        self.path = path
        self.chunks = []
        self.closed = False

    def write(self, text: str) -> int:
        self.chunks.append(text)
        return len(text.encode('utf-8'))

    def close(self) -> None:
        self.closed = True

    @property
    def text(self) -> str:
        return ''.join(self.chunks)


@pytest.fixture
def memory_sink():
    """Create an in-memory sink."""
    return MemorySink()


@pytest.fixture
def mock_connection():
    """Create a mock connection quoting values like DatabaseConnection."""
    conn = mock.MagicMock()
    conn.quote.side_effect = DatabaseConnection("localhost", 3306, "root", "").quote
    conn.query.return_value = (row for row in ())
    conn.fetch_all.return_value = []
    return conn
