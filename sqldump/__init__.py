"""
sqldump
=======
Dump a MySQL database into a portable SQL file and replay it, with support for:
- Include/exclude table lists
- Table prefix rewriting on structure, data and import
- Per-table query clauses (WHERE / ORDER BY / LIMIT)
- Size-bounded extended inserts
- Lenient or strict import
"""

from .config import ConfigLoader
from .connection import DatabaseConnection
from .database_dumper import DatabaseDumper
from .exceptions import (
    ConnectivityError,
    DumpError,
    RowExportError,
    StatementExecutionError,
    StructureNotFound,
)
from .importer import DumpImporter
from .main import main
from .models import (
    ConnectResult,
    ConnectStatus,
    DumpStats,
    ExportConfig,
    ImportStats,
    ImportStrictness,
    TableStats,
    ValueRewritePolicy,
)
from .prefix import PrefixRewriter
from .queries import MysqlQueryBuilder
from .sink import FileSink
from .table_dumper import TableDumper
from .utils import format_settings_display, print_dry_run_info, setup_logging

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "ConfigLoader",
    "DatabaseConnection",
    "DatabaseDumper",
    "DumpImporter",
    "FileSink",
    "MysqlQueryBuilder",
    "PrefixRewriter",
    "TableDumper",
    # Models
    "ConnectResult",
    "ConnectStatus",
    "DumpStats",
    "ExportConfig",
    "ImportStats",
    "ImportStrictness",
    "TableStats",
    "ValueRewritePolicy",
    # Exceptions
    "ConnectivityError",
    "DumpError",
    "RowExportError",
    "StatementExecutionError",
    "StructureNotFound",
    # Utilities
    "format_settings_display",
    "print_dry_run_info",
    "setup_logging",
]
