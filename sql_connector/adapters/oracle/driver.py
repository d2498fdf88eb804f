"""
Oracle connections through SQLAlchemy and python-oracledb.
"""

import logging
from typing import Any, Iterator, Mapping, Optional, Tuple

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import NullPool

from sql_connector.adapters.oracle.metadata import OracleMetadataSource
from sql_connector.config import DEFAULT_FETCH_SIZE
from sql_connector.core.models import (
    FETCH_SIZE_PROPERTY,
    INCLUDE_SYNONYMS_PROPERTY,
    PASSWORD_PROPERTY,
    USER_PROPERTY,
)

JDBC_THIN_PREFIX = "jdbc:oracle:thin:@"


def to_sqlalchemy_url(url: str) -> str:
    """
    Convert a thin-driver style URL to a SQLAlchemy URL.

    Both "@host:port:SID" and "@//host:port/service" forms are accepted;
    any other URL is returned unchanged.
    """
    if not url.startswith(JDBC_THIN_PREFIX):
        return url
    target = url[len(JDBC_THIN_PREFIX):]
    if target.startswith("//"):
        host_port, _, service = target[2:].partition("/")
        if not host_port or not service:
            raise ValueError(f"Invalid Oracle service URL: {url}")
        return f"oracle+oracledb://{host_port}/?service_name={service}"
    parts = target.split(":")
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"Invalid Oracle SID URL: {url}")
    host, port, sid = parts
    return f"oracle+oracledb://{host}:{port}/{sid}"


class OracleConnection:
    """
    One open Oracle connection.

    Implements the IConnection interface. Closing it also disposes the
    engine created for it.
    """

    def __init__(
        self,
        engine: Engine,
        connection: Connection,
        include_synonyms: bool = False,
        fetch_size: int = DEFAULT_FETCH_SIZE,
    ):
        self.engine = engine
        self.connection = connection
        self.include_synonyms = include_synonyms
        self.fetch_size = fetch_size

    def metadata(self) -> OracleMetadataSource:
        return OracleMetadataSource(self.connection, include_synonyms=self.include_synonyms)

    def set_read_only(self, read_only: bool) -> None:
        # must be the first statement of the transaction
        if read_only:
            self.connection.exec_driver_sql("SET TRANSACTION READ ONLY")

    def execute(self, sql: str) -> Iterator[Tuple[Any, ...]]:
        # exec_driver_sql keeps ':' inside format literals away from bind parsing
        result = self.connection.exec_driver_sql(sql)
        try:
            while True:
                rows = result.fetchmany(self.fetch_size)
                if not rows:
                    break
                for row in rows:
                    yield tuple(row)
        finally:
            result.close()

    def close(self) -> None:
        try:
            self.connection.close()
        finally:
            self.engine.dispose()


class OracleDriver:
    """
    Opens Oracle connections.

    Implements the IDatabaseDriver interface. Each connection gets its own
    unpooled engine; pooling belongs to the host engine.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def connect(self, url: str, properties: Mapping[str, str]) -> OracleConnection:
        """
        Open a connection.

        Args:
            url: SQLAlchemy URL or thin-driver style URL
            properties: user, password, fetch_size and include_synonyms

        Returns:
            Open connection
        """
        fetch_size = int(properties.get(FETCH_SIZE_PROPERTY, DEFAULT_FETCH_SIZE))
        include_synonyms = (
            properties.get(INCLUDE_SYNONYMS_PROPERTY, "false").strip().lower() == "true"
        )
        connect_args = {
            key: properties[key]
            for key in (USER_PROPERTY, PASSWORD_PROPERTY)
            if key in properties
        }

        engine = create_engine(
            to_sqlalchemy_url(url),
            poolclass=NullPool,
            arraysize=fetch_size,
            connect_args=connect_args,
        )
        try:
            connection = engine.connect()
        except Exception:
            engine.dispose()
            raise
        self.logger.debug("Opened Oracle connection to %s", engine.url.render_as_string(hide_password=True))
        return OracleConnection(
            engine,
            connection,
            include_synonyms=include_synonyms,
            fetch_size=fetch_size,
        )
