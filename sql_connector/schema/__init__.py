"""Type mapping, identifier rules and metadata discovery."""

from sql_connector.schema.type_mappings import ExternalType, TypeMapper
from sql_connector.schema.identifiers import IdentifierPolicy
from sql_connector.schema.discovery import SchemaDiscovery

__all__ = ["ExternalType", "TypeMapper", "IdentifierPolicy", "SchemaDiscovery"]
