"""
Connector configuration.
"""

import os
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from sql_connector.core.models import (
    FETCH_SIZE_PROPERTY,
    PASSWORD_PROPERTY,
    USER_PROPERTY,
)


DEFAULT_FETCH_SIZE = 10000
ENV_PREFIX = "SQL_CONNECTOR_"


class ConnectorConfig(BaseModel):
    """Configuration for one connector instance."""

    connector_id: str = "oracle"
    dialect: str = "oracle"
    connection_url: str
    connection_user: Optional[str] = None
    connection_password: Optional[str] = None
    identifier_quote: str = Field(
        default='"', description='Quote for identifiers, "" disables quoting'
    )
    fetch_size: int = Field(default=DEFAULT_FETCH_SIZE, gt=0)
    excluded_schemas: List[str] = Field(
        default_factory=list,
        description="Schemas hidden in addition to the dialect's system schemas",
    )

    @field_validator("identifier_quote")
    @classmethod
    def validate_identifier_quote(cls, value: str) -> str:
        if len(value) > 1:
            raise ValueError("identifier_quote must be a single character or empty")
        return value

    @field_validator("excluded_schemas", mode="before")
    @classmethod
    def split_excluded_schemas(cls, value):
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        return value

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, dotenv_path: Optional[str] = None) -> "ConnectorConfig":
        """
        Load configuration from environment variables.

        A .env file is read first; variables already set in the environment
        win over it.

        Args:
            prefix: Prefix of every variable name
            dotenv_path: Explicit .env file, searched for when None

        Returns:
            Validated configuration
        """
        load_dotenv(dotenv_path)

        fields = {
            "connector_id": "CONNECTOR_ID",
            "dialect": "DIALECT",
            "connection_url": "URL",
            "connection_user": "USER",
            "connection_password": "PASSWORD",
            "identifier_quote": "IDENTIFIER_QUOTE",
            "fetch_size": "FETCH_SIZE",
            "excluded_schemas": "EXCLUDED_SCHEMAS",
        }
        values = {}
        for field_name, suffix in fields.items():
            value = os.getenv(prefix + suffix)
            if value is not None:
                values[field_name] = value
        return cls(**values)

    def connection_properties(self) -> Dict[str, str]:
        """Property bag sent with every connection."""
        properties = {FETCH_SIZE_PROPERTY: str(self.fetch_size)}
        if self.connection_user is not None:
            properties[USER_PROPERTY] = self.connection_user
        if self.connection_password is not None:
            properties[PASSWORD_PROPERTY] = self.connection_password
        return properties
