"""
Output sink for dump artifacts.
"""

import logging
from pathlib import Path
from typing import Optional, TextIO


class FileSink:
    """Append-only UTF-8 file writer with context manager support."""

    ENCODING = 'utf-8'

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self.bytes_written = 0
        self._handle: Optional[TextIO] = None

    def __enter__(self) -> "FileSink":
        if self._handle is None:
            if self.path is None:
                raise ValueError("FileSink needs a path before it can be opened")
            self.open(self.path)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def open(self, path: str) -> None:
        """Create (or truncate) the output file."""
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.path = str(output_path)
        self.bytes_written = 0
        # newline='' keeps '\n' as-is on every platform
        self._handle = open(output_path, 'w', encoding=self.ENCODING, newline='')
        logging.debug(f"Opened dump file {self.path}")

    def write(self, text: str) -> int:
        """Append text and return the number of bytes written."""
        if self._handle is None:
            raise ValueError("FileSink is not open")
        self._handle.write(text)
        size = len(text.encode(self.ENCODING))
        self.bytes_written += size
        return size

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            logging.debug(f"Closed dump file {self.path} ({self.bytes_written} bytes)")
