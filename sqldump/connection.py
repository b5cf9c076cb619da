"""
Database connection management for sqldump.
"""

import logging
import socket
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Generator, Optional

import mysql.connector
from mysql.connector import Error as MySQLError
from mysql.connector.conversion import MySQLConverter

from .exceptions import ConnectivityError
from .models import ConnectResult, ConnectStatus


class DatabaseConnection:
    """Manages a MySQL connection with context manager support.

    Connecting is a two-step routine: the local socket first, then the
    network using the resolved address of the host. Rows are always read
    through unbuffered cursors, so a result set must be drained and the
    cursor closed before the next statement is sent.
    """

    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8mb4'

    # MySQL string literal escapes, as done by mysql_real_escape_string()
    _ESCAPES = str.maketrans({
        '\\': '\\\\',
        "'": "\\'",
        '"': '\\"',
        '\n': '\\n',
        '\r': '\\r',
        '\x00': '\\0',
        '\x1a': '\\Z',
    })

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: Optional[str] = None,
        unix_socket: Optional[str] = None
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.unix_socket = unix_socket
        self.connection = None
        self.status: Optional[ConnectStatus] = None
        self._converter = MySQLConverter()

        # Pre-build type formatters for faster dispatch
        self._type_formatters: dict[type, callable] = {
            type(None): lambda v: 'NULL',
            bool: lambda v: '1' if v else '0',
            int: str,
            float: str,
            Decimal: str,
            bytes: lambda v: f"X'{v.hex()}'",
            bytearray: lambda v: f"X'{v.hex()}'",
            datetime: self._format_temporal,
            date: self._format_temporal,
            time: self._format_temporal,
            timedelta: self._format_temporal,
            set: self._format_set,
            frozenset: self._format_set,
        }

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> ConnectResult:
        """Establish database connection, raising ConnectivityError on failure."""
        result = self.try_connect()
        if not result.ok:
            logging.error(f"Failed to connect to database: {result.error}")
            raise ConnectivityError(self.host, result.error) from result.error

        self.connection = result.connection
        self.status = result.status
        logging.info(
            f"Connected to {self.host}:{self.port}/{self.database or 'N/A'} "
            f"({result.status.value})"
        )
        return result

    def try_connect(self) -> ConnectResult:
        """Try the local socket, then the network. Never raises."""
        try:
            return ConnectResult(ConnectStatus.CONNECTED, self._make_connection(use_socket=True))
        except MySQLError as e:
            logging.warning(f"Socket connection to {self.host} failed: {e}")

        try:
            return ConnectResult(ConnectStatus.FALLBACK, self._make_connection(use_socket=False))
        except (MySQLError, OSError) as e:
            return ConnectResult(ConnectStatus.FAILED, error=e)

    def _make_connection(self, use_socket: bool = True):
        params: dict[str, Any] = {
            'user': self.user,
            'password': self.password,
            'database': self.database,
            'charset': self.DEFAULT_CHARSET,
            'use_unicode': True,
            'autocommit': True,
        }
        if use_socket and self.unix_socket:
            params['unix_socket'] = self.unix_socket
        else:
            params['host'] = self.host if use_socket else socket.gethostbyname(self.host)
            params['port'] = self.port or self.DEFAULT_PORT
        return mysql.connector.connect(**params)

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def query(self, sql: str) -> Generator[tuple, None, None]:
        """Stream rows of a query through an unbuffered cursor.

        The cursor is drained and closed when iteration finishes, fails or
        the generator is closed early.
        """
        cursor = self.connection.cursor(buffered=False)
        try:
            cursor.execute(sql)
            for row in cursor:
                yield row
        finally:
            self._release(cursor)

    def _release(self, cursor) -> None:
        try:
            if self.connection.unread_result:
                cursor.fetchall()
        finally:
            cursor.close()

    def fetch_all(self, sql: str) -> list[dict[str, Any]]:
        """Execute a metadata query and return all rows as dicts."""
        cursor = self.connection.cursor(dictionary=True)
        try:
            cursor.execute(sql)
            return cursor.fetchall()
        finally:
            cursor.close()

    def execute(self, sql: str) -> int:
        """Execute a statement and return the affected row count."""
        cursor = self.connection.cursor(buffered=True)
        try:
            cursor.execute(sql)
            return cursor.rowcount
        finally:
            cursor.close()

    def quote(self, value: Any) -> str:
        """Format a non-null value as a SQL literal.

        Uses type-based dispatch for common types to avoid isinstance() overhead.
        """
        formatter = self._type_formatters.get(type(value))
        if formatter:
            return formatter(value)

        return "'" + str(value).translate(self._ESCAPES) + "'"

    def _format_temporal(self, value) -> str:
        # DATETIME(6) and TIME(6) fractions are kept by the driver's converter
        converter = self._converter
        return bytes(converter.quote(converter.escape(converter.to_mysql(value)))).decode('ascii')

    def _format_set(self, value) -> str:
        """SET columns are read back as Python sets of member names."""
        return self.quote(','.join(sorted(value)))
