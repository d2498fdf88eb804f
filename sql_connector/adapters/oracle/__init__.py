"""Oracle adapter for the connector."""

from sql_connector.adapters.oracle.dialect import (
    ORACLE_DIALECT,
    ORACLE_SYSTEM_SCHEMAS,
    oracle_type_mapper,
)
from sql_connector.adapters.oracle.driver import OracleDriver, to_sqlalchemy_url
from sql_connector.adapters.oracle.metadata import OracleMetadataSource

__all__ = [
    "ORACLE_DIALECT",
    "ORACLE_SYSTEM_SCHEMAS",
    "oracle_type_mapper",
    "OracleDriver",
    "OracleMetadataSource",
    "to_sqlalchemy_url",
]
