"""
MySQL query templates used by the dump and import engines.
"""


class MysqlQueryBuilder:
    """Builds the dialect-specific statements the engines need."""

    def show_tables(self, database: str) -> str:
        """List base tables (views excluded) of a schema, in name order."""
        database = database.replace("'", "''")
        return (
            "SELECT table_name AS table_name "
            "FROM information_schema.tables "
            f"WHERE table_schema = '{database}' AND table_type = 'BASE TABLE' "
            "ORDER BY table_name"
        )

    def show_create_table(self, table: str) -> str:
        return f"SHOW CREATE TABLE {quote_identifier(table)}"

    def drop_table(self, table: str) -> str:
        return f"DROP TABLE {quote_identifier(table)}"

    def select_all(self, table: str) -> str:
        return f"SELECT * FROM {quote_identifier(table)} "


def quote_identifier(name: str) -> str:
    """Quote a MySQL identifier with backticks."""
    return '`' + name.replace('`', '``') + '`'
