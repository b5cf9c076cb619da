"""
Utility functions for sqldump.
"""

import logging
import sys
from pathlib import Path
from typing import Any

from .models import ExportConfig


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration."""
    log_level = getattr(logging, log_settings.get('level', 'INFO').upper())
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def print_dry_run_info(database: str, tables: list[str], config: ExportConfig) -> None:
    """Print information about what would be dumped in dry-run mode."""
    logging.info(f"Would dump database: {database}")

    settings_parts = format_settings_display(config)
    if settings_parts:
        logging.info(f"  Settings: {', '.join(settings_parts)}")

    if not tables:
        logging.info("  - No tables match the include/exclude settings")

    for table in tables:
        clause = config.query_clause(table)
        if clause:
            logging.info(f"  - {table} (clause='{clause.strip()}')")
        elif config.no_table_data and table not in config.query_clauses:
            logging.info(f"  - {table} (structure only)")
        else:
            logging.info(f"  - {table}")


def format_settings_display(config: ExportConfig) -> list[str]:
    """Format export settings for display in dry-run mode."""
    parts = []
    if config.old_prefix:
        parts.append(f"prefix={config.old_prefix}->{config.new_prefix}")
    if config.no_table_data:
        parts.append("no_table_data")
    if config.add_drop_table:
        parts.append("add_drop_table")
    if not config.extended_insert:
        parts.append("extended_insert=off")
    if config.include_tables:
        parts.append(f"include={','.join(sorted(config.include_tables))}")
    if config.exclude_tables:
        parts.append(f"exclude={','.join(sorted(config.exclude_tables))}")
    return parts
