"""
Type mapping between external database type codes and logical types.
"""

from enum import IntEnum
from typing import Dict, Optional

from sql_connector.core.models import (
    BIGINT,
    BOOLEAN,
    DATE,
    DOUBLE,
    MAX_VARCHAR_LENGTH,
    TIME,
    TIMESTAMP,
    VARBINARY,
    LogicalType,
    TypeKind,
    varchar,
)


class ExternalType(IntEnum):
    """Standard SQL data type codes reported by database metadata."""

    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    STRUCT = 2002
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    REF = 2006
    DATALINK = 70
    BOOLEAN = 16
    ROWID = -8
    NCLOB = 2011
    SQLXML = 2009
    REF_CURSOR = 2012
    TIME_WITH_TIMEZONE = 2013
    TIMESTAMP_WITH_TIMEZONE = 2014


# Text types whose length comes from the declared column size
SIZED_TEXT_TYPES = {
    ExternalType.CHAR,
    ExternalType.NCHAR,
    ExternalType.VARCHAR,
    ExternalType.NVARCHAR,
    ExternalType.LONGVARCHAR,
    ExternalType.LONGNVARCHAR,
}

FIXED_TYPE_MAP: Dict[int, LogicalType] = {
    ExternalType.BIT: BOOLEAN,
    ExternalType.BOOLEAN: BOOLEAN,
    ExternalType.TINYINT: BIGINT,
    ExternalType.SMALLINT: BIGINT,
    ExternalType.INTEGER: BIGINT,
    ExternalType.BIGINT: BIGINT,
    # NUMERIC/DECIMAL lose exactness here
    ExternalType.FLOAT: DOUBLE,
    ExternalType.REAL: DOUBLE,
    ExternalType.DOUBLE: DOUBLE,
    ExternalType.NUMERIC: DOUBLE,
    ExternalType.DECIMAL: DOUBLE,
    ExternalType.BINARY: VARBINARY,
    ExternalType.VARBINARY: VARBINARY,
    ExternalType.LONGVARBINARY: VARBINARY,
    ExternalType.DATE: DATE,
    ExternalType.TIME: TIME,
    ExternalType.TIMESTAMP: TIMESTAMP,
    ExternalType.CLOB: varchar(),
    ExternalType.NCLOB: varchar(),
    ExternalType.BLOB: VARBINARY,
    ExternalType.OTHER: VARBINARY,
}

GENERIC_SQL_TYPES: Dict[TypeKind, str] = {
    TypeKind.BOOLEAN: "boolean",
    TypeKind.BIGINT: "bigint",
    TypeKind.DOUBLE: "double precision",
    TypeKind.VARCHAR: "varchar",
    TypeKind.VARBINARY: "varbinary",
    TypeKind.DATE: "date",
    TypeKind.TIME: "time",
    TypeKind.TIMESTAMP: "timestamp",
}


class TypeMapper:
    """
    Maps external type codes to logical types and back to SQL type names.

    Args:
        sql_type_names: Dialect SQL type name per logical type kind. A
            varchar name may contain "{length}" for bounded types and is
            used bare for unbounded ones.
        unbounded_varchar: SQL type name for unbounded varchar, defaults to
            the bare varchar name
    """

    def __init__(
        self,
        sql_type_names: Optional[Dict[TypeKind, str]] = None,
        unbounded_varchar: Optional[str] = None,
    ):
        self.sql_type_names = dict(GENERIC_SQL_TYPES)
        if sql_type_names:
            self.sql_type_names.update(sql_type_names)
        self.unbounded_varchar = unbounded_varchar

    def to_logical_type(
        self, type_code: int, declared_size: Optional[int] = None
    ) -> Optional[LogicalType]:
        """
        Get the logical type for an external type code.

        Args:
            type_code: Standard SQL data type code
            declared_size: Declared column size (length for text types)

        Returns:
            The logical type, or None when the code is not supported and the
            column should be dropped
        """
        if type_code in SIZED_TEXT_TYPES:
            if declared_size is None or declared_size <= 0:
                return varchar()
            return varchar(min(declared_size, MAX_VARCHAR_LENGTH))
        return FIXED_TYPE_MAP.get(type_code)

    def to_physical_type(self, logical_type: LogicalType) -> str:
        """Get the dialect SQL type name for a logical type."""
        name = self.sql_type_names[logical_type.kind]
        if logical_type.kind != TypeKind.VARCHAR:
            return name
        if logical_type.is_unbounded:
            return self.unbounded_varchar or name.split("(")[0]
        if "{length}" in name:
            return name.format(length=logical_type.length)
        return f"{name}({logical_type.length})"
