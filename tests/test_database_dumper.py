"""
Unit tests for database_dumper.py
"""

import re
from unittest import mock

import pytest
from mysql.connector import Error as MySQLError

from sqldump.database_dumper import DatabaseDumper
from sqldump.exceptions import RowExportError
from sqldump.models import DumpStats, ExportConfig
from sqldump.sink import FileSink

TABLES = ["wp_options", "wp_posts", "wp_users"]


def table_rows(names):
    return [{"table_name": name} for name in names]


class TestListTables:
    """Tests for list_tables method."""

    @pytest.fixture
    def connection(self, mock_connection):
        mock_connection.fetch_all.return_value = table_rows(TABLES)
        return mock_connection

    def make_dumper(self, connection, memory_sink, **config):
        return DatabaseDumper(connection, memory_sink, ExportConfig(**config), database="wordpress")

    def test_all_tables(self, connection, memory_sink):
        dumper = self.make_dumper(connection, memory_sink)
        assert dumper.list_tables() == TABLES
        query = connection.fetch_all.call_args.args[0]
        assert "table_schema = 'wordpress'" in query
        assert "BASE TABLE" in query

    def test_include_tables(self, connection, memory_sink):
        dumper = self.make_dumper(
            connection, memory_sink, include_tables=frozenset({"wp_users", "wp_posts", "missing"})
        )
        # Enumeration order kept, unknown included tables ignored
        assert dumper.list_tables() == ["wp_posts", "wp_users"]

    def test_exclude_tables(self, connection, memory_sink):
        dumper = self.make_dumper(connection, memory_sink, exclude_tables=frozenset({"wp_posts"}))
        assert dumper.list_tables() == ["wp_options", "wp_users"]

    def test_exclude_wins_over_include(self, connection, memory_sink):
        dumper = self.make_dumper(
            connection, memory_sink,
            include_tables=frozenset({"wp_posts", "wp_users"}),
            exclude_tables=frozenset({"wp_posts"})
        )
        assert dumper.list_tables() == ["wp_users"]

    def test_duplicates_listed_once(self, connection, memory_sink):
        connection.fetch_all.return_value = table_rows(["a", "b", "a"])
        dumper = self.make_dumper(connection, memory_sink)
        assert dumper.list_tables() == ["a", "b"]

    def test_connectivity_error_propagates(self, connection, memory_sink):
        connection.fetch_all.side_effect = MySQLError(msg="Lost connection")
        dumper = self.make_dumper(connection, memory_sink)
        with pytest.raises(MySQLError):
            dumper.list_tables()


class TestGetHeader:
    """Tests for get_header method."""

    def test_header_format(self, mock_connection, memory_sink):
        dumper = DatabaseDumper(
            mock_connection, memory_sink, ExportConfig(), database="wordpress", host="db.local"
        )
        header = dumper.get_header()

        assert header.startswith(
            "-- All In One WP Migration SQL Dump\n"
            "-- http://servmask.com/\n"
            "--\n"
            "-- Host: db.local\n"
            "-- Generation Time: "
        )
        assert header.endswith(
            "\n\n"
            "--\n"
            "-- Database: `wordpress`\n"
            "--\n\n"
        )
        generated = re.search(r"-- Generation Time: (.*)\n", header).group(1)
        assert re.fullmatch(r"\w{3}, \d{2} \w{3} \d{4} \d{2}:\d{2}:\d{2} [+-]\d{4}", generated)


class TestRun:
    """Tests for the full dump run."""

    @pytest.fixture
    def connection(self, mock_connection):
        def fetch_all(sql):
            if sql.startswith("SELECT table_name"):
                return table_rows(["wp_posts", "wp_gone", "wp_users"])
            match = re.match(r"SHOW CREATE TABLE `(\w+)`", sql)
            if match and match.group(1) != "wp_gone":
                name = match.group(1)
                return [{"Table": name, "Create Table": f"CREATE TABLE `{name}` (`id` int)"}]
            return []

        rows = {
            "SELECT * FROM `wp_posts` ": [(1, 'a'), (2, None)],
            "SELECT * FROM `wp_users` ": [(7, 'admin')],
        }
        mock_connection.fetch_all.side_effect = fetch_all
        mock_connection.query.side_effect = lambda sql: (row for row in rows[sql])
        return mock_connection

    def test_run_writes_artifact(self, connection, memory_sink):
        config = ExportConfig(old_prefix="wp_", new_prefix="wp2_", add_drop_table=True)
        dumper = DatabaseDumper(connection, memory_sink, config, database="wordpress")

        stats = dumper.run("/tmp/out.sql")

        assert isinstance(stats, DumpStats)
        assert memory_sink.path == "/tmp/out.sql"
        assert memory_sink.closed is True
        assert stats.total_tables == 2
        assert stats.total_rows == 3
        assert stats.skipped_tables == ["wp_gone"]

        text = memory_sink.text
        assert text.startswith("-- All In One WP Migration SQL Dump\n")
        assert text.count("-- Table structure for table `wp2_posts`") == 1
        assert "INSERT INTO `wp2_posts` VALUES (1,'a'),(2,NULL);\n" in text
        assert "INSERT INTO `wp2_users` VALUES (7,'admin');\n" in text
        assert "wp_gone" not in text and "wp2_gone" not in text
        # Tables in enumeration order, structure before data
        assert text.index("CREATE TABLE `wp2_posts`") < text.index("INSERT INTO `wp2_posts`")
        assert text.index("INSERT INTO `wp2_posts`") < text.index("DROP TABLE IF EXISTS `wp2_users`")

    def test_run_structure_only(self, connection, memory_sink):
        dumper = DatabaseDumper(
            connection, memory_sink, ExportConfig(no_table_data=True), database="wordpress"
        )
        stats = dumper.run("out.sql")

        assert stats.total_rows == 0
        assert "INSERT" not in memory_sink.text
        connection.query.assert_not_called()

    def test_row_export_error_aborts(self, connection, memory_sink):
        connection.query.side_effect = MySQLError(msg="Lost connection")
        dumper = DatabaseDumper(connection, memory_sink, ExportConfig(), database="wordpress")

        with pytest.raises(RowExportError):
            dumper.run("out.sql")
        assert memory_sink.closed is True
        assert "wp_users" not in memory_sink.text

    def test_run_to_file(self, connection, tmp_path):
        output = tmp_path / "nested" / "dump.sql"
        dumper = DatabaseDumper(connection, FileSink(), ExportConfig(), database="wordpress")

        stats = dumper.run(str(output))

        content = output.read_text(encoding="utf-8")
        assert "INSERT INTO `wp_users` VALUES (7,'admin');\n" in content
        assert stats.bytes_written == len(content.encode("utf-8"))
