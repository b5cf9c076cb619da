"""
Data models and enums for sqldump.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional


class ValueRewritePolicy(Enum):
    """Which column values get their table prefix rewritten."""
    TRUTHY = "truthy"
    ALWAYS = "always"


class ImportStrictness(Enum):
    """How the import replayer reacts to a failing statement."""
    LENIENT = "lenient"
    STRICT = "strict"


class ConnectStatus(Enum):
    """Outcome of the two-step connect routine."""
    CONNECTED = "connected"
    FALLBACK = "fallback"
    FAILED = "failed"


@dataclass
class ConnectResult:
    """Tagged result of a connection attempt."""
    status: ConnectStatus
    connection: Any = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status is not ConnectStatus.FAILED


@dataclass(frozen=True)
class ExportConfig:
    """Immutable settings for one dump run."""
    include_tables: frozenset[str] = frozenset()
    exclude_tables: frozenset[str] = frozenset()
    old_prefix: str = ""
    new_prefix: str = ""
    no_table_data: bool = False
    add_drop_table: bool = False
    extended_insert: bool = True
    query_clauses: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    max_line_size: int = 1000000
    value_rewrite: ValueRewritePolicy = ValueRewritePolicy.TRUTHY

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "ExportConfig":
        """
        Create ExportConfig from the `dump` section of the configuration.
        """
        kwargs: dict[str, Any] = {}
        for key in ['include_tables', 'exclude_tables']:
            if settings.get(key):
                kwargs[key] = _as_frozenset(settings[key])
        for key in ['old_prefix', 'new_prefix']:
            if settings.get(key) is not None:
                kwargs[key] = str(settings[key])
        for key in ['no_table_data', 'add_drop_table', 'extended_insert']:
            if key in settings:
                kwargs[key] = bool(settings[key])
        if settings.get('query_clauses'):
            kwargs['query_clauses'] = MappingProxyType(dict(settings['query_clauses']))
        if settings.get('max_line_size') is not None:
            max_line_size = int(settings['max_line_size'])
            if max_line_size <= 0:
                raise ValueError(f"max_line_size must be positive, got {max_line_size}")
            kwargs['max_line_size'] = max_line_size
        if settings.get('value_rewrite'):
            kwargs['value_rewrite'] = ValueRewritePolicy(settings['value_rewrite'])
        return cls(**kwargs)

    def is_eligible(self, table: str) -> bool:
        """Check include/exclude filters, exclusion taking precedence."""
        if table in self.exclude_tables:
            return False
        return not self.include_tables or table in self.include_tables

    def query_clause(self, table: str) -> Optional[str]:
        return self.query_clauses.get(table)


def _as_frozenset(value: str | Iterable[str]) -> frozenset[str]:
    if isinstance(value, str):
        return frozenset([value])
    return frozenset(value)


@dataclass
class TableStats:
    """Statistics for a single table export."""
    table: str
    rows_dumped: int = 0
    structure_found: bool = False
    data_skipped: bool = False
    error: Optional[str] = None


@dataclass
class DumpStats:
    """Overall dump statistics."""
    database: str = ""
    file_path: str = ""
    tables: list[TableStats] = field(default_factory=list)
    total_rows: int = 0
    bytes_written: int = 0

    @property
    def total_tables(self) -> int:
        return sum(1 for t in self.tables if t.structure_found)

    @property
    def skipped_tables(self) -> list[str]:
        return [t.table for t in self.tables if not t.structure_found]


@dataclass
class ImportStats:
    """Statistics for a dump replay."""
    file_path: str = ""
    lines_read: int = 0
    statements_executed: int = 0
    statements_failed: int = 0
    residual: str = ""
    errors: list[dict[str, str]] = field(default_factory=list)
