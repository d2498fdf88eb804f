"""Core interfaces, models and errors for the connector."""

from sql_connector.core.interfaces import (
    IDatabaseDriver,
    IConnection,
    IMetadataSource,
)
from sql_connector.core.models import (
    LogicalType,
    TypeKind,
    ColumnDescriptor,
    TableHandle,
    SchemaTableName,
    Range,
    Domain,
    PredicateSet,
    SplitConnectionInfo,
    ScanSplit,
)
from sql_connector.core.errors import (
    ErrorKind,
    ConnectorError,
    TableNotFoundError,
    AmbiguousTableError,
    UnsupportedSchemaError,
    CompilerContractError,
)

__all__ = [
    "IDatabaseDriver",
    "IConnection",
    "IMetadataSource",
    "LogicalType",
    "TypeKind",
    "ColumnDescriptor",
    "TableHandle",
    "SchemaTableName",
    "Range",
    "Domain",
    "PredicateSet",
    "SplitConnectionInfo",
    "ScanSplit",
    "ErrorKind",
    "ConnectorError",
    "TableNotFoundError",
    "AmbiguousTableError",
    "UnsupportedSchemaError",
    "CompilerContractError",
]
