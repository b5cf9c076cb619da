"""
Main database dumping orchestration for sqldump.
"""

import logging
from datetime import datetime
from email.utils import format_datetime
from typing import Optional

from .exceptions import RowExportError
from .models import DumpStats, ExportConfig, TableStats
from .prefix import PrefixRewriter
from .protocols import Connection, QueryBuilder, Sink
from .queries import MysqlQueryBuilder
from .table_dumper import TableDumper


class DatabaseDumper:
    """Dumps the eligible tables of one database into a single artifact."""

    def __init__(
        self,
        connection: Connection,
        sink: Sink,
        config: ExportConfig,
        database: str,
        host: str = 'localhost',
        query_builder: Optional[QueryBuilder] = None
    ):
        self.connection = connection
        self.sink = sink
        self.config = config
        self.database = database
        self.host = host
        self.query_builder = query_builder or MysqlQueryBuilder()
        self.rewriter = PrefixRewriter(config.old_prefix, config.new_prefix)

    def run(self, output_path: str) -> DumpStats:
        """Dump the database into output_path.

        Tables are exported in enumeration order, each with its structure
        first and its rows after.

        Raises:
            RowExportError: If a table's rows could not be exported.
        """
        stats = DumpStats(database=self.database, file_path=output_path)

        tables = self.list_tables()
        logging.info(f"Dumping {len(tables)} table(s) from '{self.database}' to {output_path}")

        dumper = TableDumper(
            self.connection, self.sink, self.config,
            query_builder=self.query_builder, rewriter=self.rewriter
        )

        self.sink.open(output_path)
        try:
            self.sink.write(self.get_header())

            for table in tables:
                try:
                    table_stats = dumper.dump_table(table)
                except RowExportError:
                    logging.error(f"Aborting dump of '{self.database}' at table '{table}'")
                    raise

                stats.tables.append(table_stats)
                stats.total_rows += table_stats.rows_dumped
                self._log_table_result(table_stats)
        finally:
            self.sink.close()

        stats.bytes_written = getattr(self.sink, 'bytes_written', 0)
        return stats

    def list_tables(self) -> list[str]:
        """
        List the tables to export: all base tables (or only the included
        ones) minus the excluded ones, in the order returned by the server.
        """
        rows = self.connection.fetch_all(self.query_builder.show_tables(self.database))

        tables = []
        seen = set()
        for row in rows:
            table = row['table_name']
            if table in seen:
                continue
            seen.add(table)
            if self.config.is_eligible(table):
                tables.append(table)
            else:
                logging.debug(f"Table '{table}' filtered out by include/exclude settings")

        return tables

    def get_header(self) -> str:
        """Returns header for dump file."""
        generated = format_datetime(datetime.now().astimezone())
        return (
            "-- All In One WP Migration SQL Dump\n"
            "-- http://servmask.com/\n"
            "--\n"
            f"-- Host: {self.host}\n"
            f"-- Generation Time: {generated}\n\n"
            "--\n"
            f"-- Database: `{self.database}`\n"
            "--\n\n"
        )

    def _log_table_result(self, table_stats: TableStats) -> None:
        """Log the result of a table dump."""
        if not table_stats.structure_found:
            logging.warning(f"  - {table_stats.table}: skipped ({table_stats.error})")
        elif table_stats.data_skipped:
            logging.info(f"  ✓ {table_stats.table}: structure only")
        else:
            logging.info(f"  ✓ {table_stats.table}: {table_stats.rows_dumped} rows")
