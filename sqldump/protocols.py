"""Collaborator interfaces injected into the dump and import engines.

The engines never construct their connection, sink or query builder; any
object with the methods below can be passed in. ``DatabaseConnection``,
``FileSink`` and ``MysqlQueryBuilder`` are the bundled implementations.
"""

from typing import Any, Generator, Protocol


class Connection(Protocol):
    """Database connection used by the engines.

    ``query`` must stream rows from an unbuffered cursor and release the
    cursor once the iterator is exhausted or closed, so only one result set
    is ever in flight on the connection.
    """

    def query(self, sql: str) -> Generator[tuple, None, None]:
        """Stream the rows of ``sql`` in column order."""
        ...

    def fetch_all(self, sql: str) -> list[dict[str, Any]]:
        """Run a small metadata query and return its rows keyed by column."""
        ...

    def execute(self, sql: str) -> int:
        """Execute a statement, returning the affected row count."""
        ...

    def quote(self, value: Any) -> str:
        """Render a non-null value as a SQL literal."""
        ...


class Sink(Protocol):
    """Append-only writer for the dump artifact."""

    def open(self, path: str) -> None:
        ...

    def write(self, text: str) -> int:
        """Append text, returning the number of bytes written."""
        ...

    def close(self) -> None:
        ...


class QueryBuilder(Protocol):
    """Produces dialect-correct statements."""

    def show_tables(self, database: str) -> str:
        ...

    def show_create_table(self, table: str) -> str:
        ...

    def drop_table(self, table: str) -> str:
        ...

    def select_all(self, table: str) -> str:
        ...
