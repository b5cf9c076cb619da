"""
Table dumping functionality for sqldump.
"""

import logging
from contextlib import closing
from typing import Any, Iterable, Optional

from mysql.connector import Error as MySQLError
from mysql.connector import errorcode

from .exceptions import RowExportError, StructureNotFound
from .models import ExportConfig, TableStats, ValueRewritePolicy
from .prefix import PrefixRewriter
from .protocols import Connection, QueryBuilder, Sink
from .queries import MysqlQueryBuilder, quote_identifier

SECTION_SEPARATOR = "-- " + "-" * 56 + "\n\n"
STATEMENT_END = ";\n"


class TableDumper:
    """Writes the structure and data of individual tables into a sink."""

    def __init__(
        self,
        connection: Connection,
        sink: Sink,
        config: ExportConfig,
        query_builder: Optional[QueryBuilder] = None,
        rewriter: Optional[PrefixRewriter] = None
    ):
        self.connection = connection
        self.sink = sink
        self.config = config
        self.query_builder = query_builder or MysqlQueryBuilder()
        self.rewriter = rewriter or PrefixRewriter(config.old_prefix, config.new_prefix)

    def dump_table(self, table: str) -> TableStats:
        """
        Dump structure and, unless skipped, the rows of a table.

        Args:
            table: Name of the table in the source database.

        Returns:
            TableStats with dump statistics.

        Raises:
            RowExportError: If the rows could not be read or written.
        """
        stats = TableStats(table=table)

        if not self.export_structure(table):
            stats.error = str(StructureNotFound(table))
            logging.warning(stats.error)
            return stats
        stats.structure_found = True

        if not self.has_data(table):
            stats.data_skipped = True
            logging.debug(f"Skipping data of table '{table}' (no_table_data)")
            return stats

        stats.rows_dumped = self.export_rows(table)
        return stats

    def has_data(self, table: str) -> bool:
        """A per-table query clause overrides no_table_data."""
        return not self.config.no_table_data or table in self.config.query_clauses

    def export_structure(self, table: str) -> bool:
        """Write the definition of a table.

        Returns:
            False if the table has no definition (dropped meanwhile, or a view).
        """
        try:
            rows = self.connection.fetch_all(self.query_builder.show_create_table(table))
        except MySQLError as e:
            if e.errno == errorcode.ER_NO_SUCH_TABLE:
                return False
            raise

        for row in rows:
            definition = row.get('Create Table')
            if not definition:
                continue
            if isinstance(definition, (bytes, bytearray)):
                definition = definition.decode('utf-8')

            table_name = quote_identifier(self.rewriter.replace(table))

            self.sink.write(
                SECTION_SEPARATOR +
                "--\n"
                f"-- Table structure for table {table_name}\n"
                "--\n\n"
            )

            if self.config.add_drop_table:
                self.sink.write(f"DROP TABLE IF EXISTS {table_name};\n\n")

            # Foreign keys and constraint names may embed the prefix anywhere
            definition = self.rewriter.replace(definition, anchored=False)
            self.sink.write(definition + ";\n\n")
            return True

        return False

    def export_rows(self, table: str) -> int:
        """Write the rows of a table as batched INSERT statements.

        Returns:
            Number of rows written.
        """
        if not self.has_data(table):
            return 0

        query = self.query_builder.select_all(table)
        clause = self.config.query_clause(table)
        if clause:
            query += clause

        table_name = quote_identifier(self.rewriter.replace(table))
        logging.info(f"Dumping table '{table}' with query: {query[:200]}")

        try:
            self.sink.write(
                "--\n"
                f"-- Dumping data for table {table_name}\n"
                "--\n\n"
            )
            with closing(self.connection.query(query)) as rows:
                return self._write_inserts(table_name, rows)
        except (MySQLError, OSError) as e:
            logging.error(f"Error dumping table '{table}': {e}")
            raise RowExportError(table, e) from e

    def _write_inserts(self, table_name: str, rows: Iterable[tuple]) -> int:
        """Batch rows into INSERT statements bounded by max_line_size bytes.

        A statement is closed before a row that would push it past the limit,
        so only a statement holding a single oversized row can exceed it.
        """
        extended = self.config.extended_insert
        max_line_size = self.config.max_line_size
        statement_start = f"INSERT INTO {table_name} VALUES "
        end_size = len(STATEMENT_END)

        line_size = 0
        insert_open = False
        rows_written = 0

        for row in rows:
            values = '(' + ','.join(self._format_value(value) for value in row) + ')'

            if insert_open:
                chunk = ',' + values
                if line_size + len(chunk.encode('utf-8')) + end_size > max_line_size:
                    self.sink.write(STATEMENT_END)
                    insert_open = False

            if insert_open:
                line_size += self.sink.write(chunk)
            else:
                line_size = self.sink.write(statement_start + values)
                insert_open = True

            rows_written += 1

            if not extended:
                self.sink.write(STATEMENT_END)
                insert_open = False

        if insert_open:
            self.sink.write(STATEMENT_END)

        return rows_written

    def _format_value(self, value: Any) -> str:
        if value is None:
            return 'NULL'
        if isinstance(value, str) and self._should_rewrite(value):
            value = self.rewriter.replace(value, anchored=False)
        return self.connection.quote(value)

    def _should_rewrite(self, value: str) -> bool:
        if self.config.value_rewrite is ValueRewritePolicy.ALWAYS:
            return True
        return bool(value)
