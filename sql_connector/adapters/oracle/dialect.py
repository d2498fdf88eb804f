"""
Oracle dialect data: system schemas, literal syntax and type names.
"""

from typing import Dict, Optional

from sql_connector.core.models import TypeKind
from sql_connector.query.predicate_compiler import SqlDialect
from sql_connector.schema.type_mappings import ExternalType, TypeMapper


# Built-in and administrative schemas holding no user data
ORACLE_SYSTEM_SCHEMAS = (
    "SYS",
    "SYSTEM",
    "WMSYS",
    "INFORMATION_SCHEMA",
    "XS$NULL",
    "XDB",
    "PUBLIC",
    "CTXSYS",
    "ODMRSYS",
)

# DATE columns compare against plain 'YYYY-MM-DD' strings; TIMESTAMP
# columns need TO_TIMESTAMP with an explicit format.
ORACLE_DIALECT = SqlDialect(
    name="oracle",
    date_literal="{literal}",
    timestamp_literal="TO_TIMESTAMP({literal}, 'yyyy-mm-dd hh24:mi:ss')",
    true_literal="1",
    false_literal="0",
    always_false="1 = 0",
)

ORACLE_SQL_TYPES: Dict[TypeKind, str] = {
    TypeKind.BOOLEAN: "NUMBER(1)",
    TypeKind.BIGINT: "NUMBER(19)",
    TypeKind.DOUBLE: "BINARY_DOUBLE",
    TypeKind.VARCHAR: "VARCHAR2({length} CHAR)",
    TypeKind.VARBINARY: "BLOB",
    TypeKind.DATE: "DATE",
    TypeKind.TIME: "TIMESTAMP",
    TypeKind.TIMESTAMP: "TIMESTAMP",
}

# Vendor type codes with no standard equivalent
ORACLE_TIMESTAMPTZ = -101
ORACLE_TIMESTAMPLTZ = -102
ORACLE_INTERVALYM = -103
ORACLE_INTERVALDS = -104
ORACLE_BFILE = -13

ORACLE_TYPE_CODES: Dict[str, int] = {
    "NUMBER": ExternalType.DECIMAL,
    "FLOAT": ExternalType.FLOAT,
    "BINARY_FLOAT": ExternalType.REAL,
    "BINARY_DOUBLE": ExternalType.DOUBLE,
    "CHAR": ExternalType.CHAR,
    "NCHAR": ExternalType.NCHAR,
    "VARCHAR": ExternalType.VARCHAR,
    "VARCHAR2": ExternalType.VARCHAR,
    "NVARCHAR2": ExternalType.NVARCHAR,
    "LONG": ExternalType.LONGVARCHAR,
    "RAW": ExternalType.VARBINARY,
    "LONG RAW": ExternalType.LONGVARBINARY,
    "DATE": ExternalType.DATE,
    "BLOB": ExternalType.BLOB,
    "CLOB": ExternalType.CLOB,
    "NCLOB": ExternalType.NCLOB,
    "ROWID": ExternalType.ROWID,
    "UROWID": ExternalType.ROWID,
    "BFILE": ORACLE_BFILE,
}

# Text types whose declared size is counted in characters
CHARACTER_TYPES = {"CHAR", "NCHAR", "VARCHAR", "VARCHAR2", "NVARCHAR2"}


def oracle_type_code(type_name: str) -> int:
    """
    Get the type code Oracle metadata reports for a data type name.

    Object and other user-defined types report OTHER.
    """
    name = type_name.strip().upper()
    if name.startswith("TIMESTAMP"):
        if "LOCAL TIME ZONE" in name:
            return ORACLE_TIMESTAMPLTZ
        if "TIME ZONE" in name:
            return ORACLE_TIMESTAMPTZ
        return ExternalType.TIMESTAMP
    if name.startswith("INTERVAL YEAR"):
        return ORACLE_INTERVALYM
    if name.startswith("INTERVAL DAY"):
        return ORACLE_INTERVALDS
    return ORACLE_TYPE_CODES.get(name, ExternalType.OTHER)


def oracle_column_size(
    type_name: str,
    data_length: Optional[int],
    char_length: Optional[int],
    data_precision: Optional[int],
) -> Optional[int]:
    """Get the declared size the way Oracle metadata reports it."""
    name = type_name.strip().upper()
    if name in CHARACTER_TYPES:
        return char_length or data_length
    if name in ("NUMBER", "FLOAT"):
        return data_precision
    return data_length


def oracle_type_mapper() -> TypeMapper:
    return TypeMapper(sql_type_names=ORACLE_SQL_TYPES, unbounded_varchar="CLOB")
