"""
Exceptions raised by the sqldump engines.
"""

from typing import Optional


class DumpError(Exception):
    """Base class for all sqldump errors."""


class ConnectivityError(DumpError):
    """Database could not be reached over socket nor network."""

    def __init__(self, host: str, original_error: Optional[Exception] = None):
        self.host = host
        self.original_error = original_error
        message = f"Unable to connect to MySQL database server at {host}"
        if original_error is not None:
            message += f": {original_error}"
        super().__init__(message)


class StructureNotFound(DumpError):
    """Table disappeared between enumeration and structure extraction."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Table '{table}' has no definition, skipping data export")


class RowExportError(DumpError):
    """Query or write failure while exporting the rows of a table."""

    def __init__(self, table: str, original_error: Exception):
        self.table = table
        self.original_error = original_error
        super().__init__(f"Error exporting rows of table '{table}': {original_error}")


class StatementExecutionError(DumpError):
    """A statement from a dump stream failed to execute during replay."""

    def __init__(self, statement: str, line_number: int, original_error: Exception):
        self.statement = statement
        self.line_number = line_number
        self.original_error = original_error
        super().__init__(
            f"Statement ending at line {line_number} failed: {original_error}"
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to structured dict for logging."""
        return {
            'error_type': type(self).__name__,
            'line_number': str(self.line_number),
            'statement': self.statement[:200],
            'original_error_type': type(self.original_error).__name__,
            'original_error_message': str(self.original_error),
        }
