"""
Dump replay for sqldump.

Statements are reassembled line by line: a line ending with ``;`` (plus
optional trailing whitespace) closes the statement being accumulated.

In the default LENIENT mode a statement that fails to execute is logged,
counted in the returned ImportStats and dropped, and replay carries on with
the next line. A partially incompatible dump therefore imports as much as it
can, and the caller has to check ImportStats (or row counts) if it needs a
complete import. STRICT mode raises StatementExecutionError instead.
"""

import logging
import re
from typing import Iterable, Optional

from mysql.connector import Error as MySQLError

from .exceptions import StatementExecutionError
from .models import ImportStats, ImportStrictness
from .prefix import PrefixRewriter
from .protocols import Connection, QueryBuilder
from .queries import MysqlQueryBuilder


class DumpImporter:
    """Replays a dump stream against a database connection."""

    STATEMENT_END = re.compile(r';\s*$')

    def __init__(
        self,
        connection: Connection,
        rewriter: Optional[PrefixRewriter] = None,
        strictness: ImportStrictness = ImportStrictness.LENIENT,
        query_builder: Optional[QueryBuilder] = None
    ):
        self.connection = connection
        self.rewriter = rewriter or PrefixRewriter(None, None)
        self.strictness = strictness
        self.query_builder = query_builder or MysqlQueryBuilder()

    def import_file(self, file_path: str) -> ImportStats:
        """Replay the dump file at file_path."""
        stats = ImportStats(file_path=file_path)
        logging.info(f"Importing {file_path} ({self.strictness.value})")

        with open(file_path, 'r', encoding='utf-8') as f:
            self.import_lines(f, stats)

        return stats

    def import_lines(self, lines: Iterable[str], stats: Optional[ImportStats] = None) -> ImportStats:
        """Replay an iterable of dump lines (each keeping its line ending)."""
        if stats is None:
            stats = ImportStats()

        buffer: list[str] = []
        for line_number, line in enumerate(lines, start=1):
            stats.lines_read += 1
            line = self.rewriter.replace(line, anchored=False)
            buffer.append(line)

            if self.STATEMENT_END.search(line):
                statement = ''.join(buffer)
                buffer = []
                self._execute(statement, line_number, stats)

        residual = ''.join(buffer)
        if self._has_statement_text(buffer):
            stats.residual = residual
            logging.warning(
                f"Dump ended with an unterminated statement, not executed: {residual[:200]}"
            )

        logging.info(
            f"Import finished: {stats.statements_executed} statement(s) executed, "
            f"{stats.statements_failed} failed"
        )
        return stats

    @staticmethod
    def _has_statement_text(lines: list[str]) -> bool:
        """True unless every line is blank or a ``--`` comment."""
        return any(line.strip() and not line.lstrip().startswith('--') for line in lines)

    def _execute(self, statement: str, line_number: int, stats: ImportStats) -> None:
        try:
            self.connection.execute(statement)
        except MySQLError as e:
            error = StatementExecutionError(statement, line_number, e)
            if self.strictness is ImportStrictness.STRICT:
                raise error from e
            stats.statements_failed += 1
            stats.errors.append(error.to_dict())
            logging.warning(f"Skipping statement: {error}")
            return

        stats.statements_executed += 1

    def truncate_database(self, database: str) -> list[str]:
        """Drop every base table of a database.

        Returns:
            Names of the dropped tables.
        """
        rows = self.connection.fetch_all(self.query_builder.show_tables(database))
        tables = [row['table_name'] for row in rows]

        for table in tables:
            self.connection.execute(self.query_builder.drop_table(table))
            logging.debug(f"Dropped table '{table}'")

        logging.info(f"Dropped {len(tables)} table(s) from '{database}'")
        return tables
