"""
Connector error taxonomy.

Each failure a caller is expected to branch on has its own exception class
and ErrorKind. Driver and connection errors are not part of this taxonomy:
they reach the caller exactly as the database client raised them.
"""

from enum import Enum
from typing import Optional

from sql_connector.core.models import SchemaTableName


class ErrorKind(str, Enum):
    TABLE_NOT_FOUND = "table_not_found"
    AMBIGUOUS_TABLE = "ambiguous_table"
    NO_SUPPORTED_COLUMNS = "no_supported_columns"
    COMPILER_CONTRACT = "compiler_contract"


class ConnectorError(Exception):
    """Base class for errors raised by the connector itself."""

    kind: ErrorKind

    def __init__(self, message: str, kind: ErrorKind):
        super().__init__(message)
        self.kind = kind


class TableNotFoundError(ConnectorError):
    """The table no longer exists or is not accessible."""

    def __init__(self, schema_table_name: SchemaTableName):
        super().__init__(
            f"Table not found: {schema_table_name}", ErrorKind.TABLE_NOT_FOUND
        )
        self.schema_table_name = schema_table_name


class AmbiguousTableError(ConnectorError):
    """One logical name matched several physical objects."""

    def __init__(self, schema_table_name: SchemaTableName, matches: int):
        super().__init__(
            f"Multiple tables matched: {schema_table_name} ({matches} matches)",
            ErrorKind.AMBIGUOUS_TABLE,
        )
        self.schema_table_name = schema_table_name
        self.matches = matches


class UnsupportedSchemaError(ConnectorError):
    """The table exists but none of its columns has a supported type."""

    def __init__(self, schema_table_name: SchemaTableName):
        super().__init__(
            f"Table has no supported column types: {schema_table_name}",
            ErrorKind.NO_SUPPORTED_COLUMNS,
        )
        self.schema_table_name = schema_table_name


class CompilerContractError(ConnectorError, ValueError):
    """A constraint value does not fit the column's declared type."""

    def __init__(self, column_name: str, message: str, value: Optional[object] = None):
        super().__init__(
            f"Invalid constraint value for column {column_name}: {message}"
            + (f" (got {value!r})" if value is not None else ""),
            ErrorKind.COMPILER_CONTRACT,
        )
        self.column_name = column_name
        self.value = value
