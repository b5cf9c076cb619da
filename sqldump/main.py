#!/usr/bin/env python3
"""
sqldump - CLI Entry Point
=========================
Dump a MySQL database into a single SQL file and replay such a file, with:
- Include/exclude table lists
- Table prefix rewriting (e.g. wp_ -> wp2_)
- Per-table query clauses
- Size-bounded extended inserts
- Lenient or strict import
"""

import argparse
import logging
import sys

import yaml

from .config import ConfigLoader
from .connection import DatabaseConnection
from .database_dumper import DatabaseDumper
from .importer import DumpImporter
from .models import ImportStrictness
from .prefix import PrefixRewriter
from .sink import FileSink
from .utils import print_dry_run_info, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='sqldump - MySQL dump and import tool with table prefix rewriting'
    )
    parser.add_argument(
        '-c', '--config',
        default='config.yaml',
        help='Path to configuration file (default: config.yaml)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    dump_parser = subparsers.add_parser('dump', help='Dump the database into a SQL file')
    dump_parser.add_argument(
        '-o', '--output',
        help='Output file (default: dump.output from config)'
    )
    dump_parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be dumped without actually dumping'
    )

    import_parser = subparsers.add_parser('import', help='Replay a SQL dump file')
    import_parser.add_argument('file', help='Dump file to import')
    import_parser.add_argument(
        '--strict',
        action='store_true',
        help='Stop at the first failing statement'
    )
    import_parser.add_argument(
        '--truncate',
        action='store_true',
        help='Drop all tables of the target database before importing'
    )

    subparsers.add_parser('truncate', help='Drop all tables of the database')

    return parser


def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Load configuration
    try:
        config = ConfigLoader(args.config)
    except FileNotFoundError:
        print(f"Error: Configuration file '{args.config}' not found")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file: {e}")
        sys.exit(1)

    # Setup logging
    log_settings = config.get_logging_settings()
    if args.verbose:
        log_settings['level'] = 'DEBUG'
    setup_logging(log_settings)

    try:
        settings = config.get_connection_settings()
        with DatabaseConnection(
            host=settings['host'],
            port=settings['port'],
            user=settings['user'],
            password=settings['password'],
            database=settings['database'],
            unix_socket=settings.get('unix_socket')
        ) as conn:
            if args.command == 'dump':
                run_dump(conn, config, args)
            elif args.command == 'import':
                run_import(conn, config, args)
            else:
                DumpImporter(conn).truncate_database(conn.database)

    except Exception as e:
        logging.error(f"Fatal error: {e}")
        sys.exit(1)


def run_dump(conn: DatabaseConnection, config: ConfigLoader, args: argparse.Namespace) -> None:
    export_config = config.get_export_config()
    dumper = DatabaseDumper(
        conn, FileSink(), export_config,
        database=conn.database, host=conn.host
    )

    # Dry run mode
    if args.dry_run:
        logging.info("DRY RUN MODE - No data will be dumped")
        print_dry_run_info(conn.database, dumper.list_tables(), export_config)
        return

    stats = dumper.run(args.output or config.get_output_path())

    # Print summary
    logging.info("=" * 50)
    logging.info("DUMP COMPLETE")
    logging.info(f"File: {stats.file_path} ({stats.bytes_written} bytes)")
    logging.info(f"Tables: {stats.total_tables}")
    logging.info(f"Total Rows: {stats.total_rows}")

    if stats.skipped_tables:
        logging.warning(f"Skipped: {', '.join(stats.skipped_tables)}")


def run_import(conn: DatabaseConnection, config: ConfigLoader, args: argparse.Namespace) -> None:
    import_settings = config.get_import_settings()
    strictness = config.get_import_strictness()
    if args.strict:
        strictness = ImportStrictness.STRICT

    importer = DumpImporter(
        conn,
        rewriter=PrefixRewriter(
            import_settings.get('old_prefix'), import_settings.get('new_prefix')
        ),
        strictness=strictness
    )

    if args.truncate:
        importer.truncate_database(conn.database)

    stats = importer.import_file(args.file)

    logging.info("=" * 50)
    logging.info("IMPORT COMPLETE")
    logging.info(f"Statements: {stats.statements_executed}")

    if stats.statements_failed:
        logging.warning(f"Failed statements: {stats.statements_failed}")
        for err in stats.errors:
            logging.warning(f"  - line {err['line_number']}: {err['original_error_message']}")


if __name__ == '__main__':
    main()
