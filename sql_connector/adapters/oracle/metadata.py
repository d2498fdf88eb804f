"""
Oracle metadata extraction.

Implements IMetadataSource with queries against the ALL_* data dictionary
views, reporting rows the way a generic SQL metadata protocol does.
"""

from typing import List, Optional, Sequence

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Connection

from sql_connector.adapters.oracle.dialect import oracle_column_size, oracle_type_code
from sql_connector.core.models import ColumnRow, TableRow


SCHEMAS_SQL = text("SELECT username FROM all_users ORDER BY username")

TABLES_SQL = text(
    "SELECT NULL AS table_cat, o.owner AS table_schem, "
    "       o.object_name AS table_name, o.object_type AS table_type "
    "FROM all_objects o "
    "WHERE o.object_type IN :table_types "
    "  AND o.object_name NOT LIKE 'BIN$%' "
    "  AND (:owner IS NULL OR o.owner = :owner) "
    "  AND (:table_name IS NULL OR o.object_name = :table_name) "
    "ORDER BY table_type, table_schem, table_name"
).bindparams(bindparam("table_types", expanding=True))

_COLUMN_FIELDS = (
    "c.column_name, c.data_type, c.data_length, c.char_length, "
    "c.data_precision, c.column_id"
)

COLUMNS_SQL = (
    f"SELECT c.owner AS table_schem, c.table_name, {_COLUMN_FIELDS} "
    "FROM all_tab_columns c "
    "WHERE (:owner IS NULL OR c.owner = :owner) "
    "  AND (:table_name IS NULL OR c.table_name = :table_name) "
)

# Columns of tables reached through a synonym, reported under the synonym's name
SYNONYM_COLUMNS_SQL = (
    f"SELECT s.owner AS table_schem, s.synonym_name AS table_name, {_COLUMN_FIELDS} "
    "FROM all_synonyms s "
    "JOIN all_tab_columns c ON c.owner = s.table_owner AND c.table_name = s.table_name "
    "WHERE s.db_link IS NULL "
    "  AND (:owner IS NULL OR s.owner = :owner) "
    "  AND (:table_name IS NULL OR s.synonym_name = :table_name) "
)


class OracleMetadataSource:
    """
    Metadata of one open Oracle connection.

    Implements the IMetadataSource interface.
    """

    def __init__(self, connection: Connection, include_synonyms: bool = False):
        """
        Initialize Oracle metadata source.

        Args:
            connection: Open SQLAlchemy connection
            include_synonyms: Also report columns of tables owned by another
                user and reached through a synonym
        """
        self.connection = connection
        self.include_synonyms = include_synonyms

    def stores_upper_case_identifiers(self) -> bool:
        return True

    def get_schemas(self) -> List[str]:
        return [row[0] for row in self.connection.execute(SCHEMAS_SQL)]

    def get_tables(
        self,
        catalog: Optional[str],
        schema_name: Optional[str],
        table_name: Optional[str],
        table_types: Sequence[str],
    ) -> List[TableRow]:
        # Oracle has no catalogs
        result = self.connection.execute(
            TABLES_SQL,
            {
                "table_types": list(table_types),
                "owner": schema_name,
                "table_name": table_name,
            },
        )
        return [
            TableRow(
                catalog=row.table_cat,
                schema_name=row.table_schem,
                table_name=row.table_name,
                table_type=row.table_type,
            )
            for row in result
        ]

    def get_columns(
        self,
        catalog: Optional[str],
        schema_name: Optional[str],
        table_name: Optional[str],
    ) -> List[ColumnRow]:
        sql = COLUMNS_SQL
        if self.include_synonyms:
            sql += "UNION ALL " + SYNONYM_COLUMNS_SQL
        sql += "ORDER BY 1, 2, 8"

        result = self.connection.execute(
            text(sql), {"owner": schema_name, "table_name": table_name}
        )
        columns = []
        for row in result:
            columns.append(
                ColumnRow(
                    column_name=row.column_name,
                    data_type=oracle_type_code(row.data_type),
                    type_name=row.data_type,
                    column_size=oracle_column_size(
                        row.data_type, row.data_length, row.char_length, row.data_precision
                    ),
                )
            )
        return columns
