"""
SQL connector - exposes an external relational database to a query engine.

Main entry point for creating connectors for supported dialects.
"""

from sql_connector.config import ConnectorConfig
from sql_connector.connector import ConnectorFacade

__all__ = ["ConnectorConfig", "ConnectorFacade"]
