"""
Connector facade - main entry point.

Wires discovery, type mapping and query building together behind the
operations the host query engine calls.
"""

import logging
from contextlib import closing
from typing import Any, Iterator, List, Optional, Sequence, Set, Tuple

from sql_connector.config import ConnectorConfig
from sql_connector.core.interfaces import IConnection, IDatabaseDriver
from sql_connector.core.models import (
    FETCH_SIZE_PROPERTY,
    ColumnDescriptor,
    LogicalType,
    PredicateSet,
    ScanSplit,
    SchemaTableName,
    SplitConnectionInfo,
    TableHandle,
)
from sql_connector.query.builder import SplitQueryBuilder
from sql_connector.query.predicate_compiler import PredicateCompiler, SqlDialect
from sql_connector.schema.discovery import SchemaDiscovery
from sql_connector.schema.identifiers import IdentifierPolicy
from sql_connector.schema.type_mappings import TypeMapper


class ConnectorFacade:
    """
    Outward-facing connector object.

    Composes the dialect's capabilities (driver, type mapper, identifier
    policy, SQL dialect) chosen by configuration.
    """

    def __init__(
        self,
        config: ConnectorConfig,
        driver: IDatabaseDriver,
        type_mapper: TypeMapper,
        identifier_policy: IdentifierPolicy,
        dialect: SqlDialect,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize connector facade with dialect capabilities.

        Args:
            config: Connector configuration
            driver: Database driver for the external database
            type_mapper: Dialect type mapper
            identifier_policy: Dialect identifier rules; configured excluded
                schemas are added to its deny-list
            dialect: Dialect literal syntax
            logger: Logger shared by every component of this connector
        """
        self.config = config
        self.driver = driver
        self.type_mapper = type_mapper
        self.identifier_policy = identifier_policy.with_extra_namespaces(
            config.excluded_schemas
        )
        self.logger = logger or logging.getLogger(__name__)

        self.discovery = SchemaDiscovery(
            connector_id=config.connector_id,
            driver=driver,
            connection_url=config.connection_url,
            connection_properties=config.connection_properties(),
            identifier_policy=self.identifier_policy,
            type_mapper=type_mapper,
            logger=self.logger,
        )
        self.compiler = PredicateCompiler(dialect, identifier_quote=config.identifier_quote)
        self.query_builder = SplitQueryBuilder(self.compiler, logger=self.logger)

    @classmethod
    def from_config(
        cls, config: ConnectorConfig, logger: Optional[logging.Logger] = None
    ) -> "ConnectorFacade":
        """
        Create a connector for the dialect named in the configuration.

        Raises:
            ValueError: If the dialect is unknown
        """
        if config.dialect == "oracle":
            return cls.from_oracle(config, logger=logger)
        raise ValueError(f"Unknown dialect: {config.dialect!r}. Available: oracle")

    @classmethod
    def from_oracle(
        cls, config: ConnectorConfig, logger: Optional[logging.Logger] = None
    ) -> "ConnectorFacade":
        """
        Create a connector for Oracle.

        Args:
            config: Connector configuration
            logger: Logger for the connector

        Returns:
            Configured ConnectorFacade for Oracle
        """
        from sql_connector.adapters.oracle import (
            ORACLE_DIALECT,
            ORACLE_SYSTEM_SCHEMAS,
            OracleDriver,
            oracle_type_mapper,
        )

        logger = logger or logging.getLogger(__name__)

        return cls(
            config=config,
            driver=OracleDriver(logger=logger),
            type_mapper=oracle_type_mapper(),
            identifier_policy=IdentifierPolicy(ORACLE_SYSTEM_SCHEMAS),
            dialect=ORACLE_DIALECT,
            logger=logger,
        )

    def list_schemas(self) -> Set[str]:
        return self.discovery.list_schemas()

    def list_tables(self, schema_name: Optional[str] = None) -> List[SchemaTableName]:
        return self.discovery.list_tables(schema_name)

    def resolve_table(self, schema_table_name: SchemaTableName) -> Optional[TableHandle]:
        return self.discovery.resolve_table(schema_table_name)

    def list_columns(self, table: TableHandle) -> List[ColumnDescriptor]:
        return self.discovery.list_columns(table)

    def to_physical_type(self, logical_type: LogicalType) -> str:
        return self.type_mapper.to_physical_type(logical_type)

    def build_sql(
        self,
        table: TableHandle,
        columns: Sequence[ColumnDescriptor],
        predicates: Optional[PredicateSet] = None,
    ) -> str:
        return self.query_builder.build_sql(table, columns, predicates)

    def get_split(
        self, table: TableHandle, predicates: Optional[PredicateSet] = None
    ) -> ScanSplit:
        """Create the single split scanning a table."""
        return ScanSplit(
            connector_id=self.config.connector_id,
            connection=SplitConnectionInfo(
                connection_url=self.config.connection_url,
                connection_properties=self.config.connection_properties(),
            ),
            table=table,
            predicates=PredicateSet.all() if predicates is None else predicates,
        )

    def build_split_sql(self, split: ScanSplit, columns: Sequence[ColumnDescriptor]) -> str:
        return self.build_sql(split.table, columns, split.predicates)

    def open_connection(self, split_info: SplitConnectionInfo) -> IConnection:
        """
        Open a read-only connection for a split.

        The configured fetch size always overrides the split's own value.

        Args:
            split_info: URL and property bag of the split

        Returns:
            Open connection the caller must close
        """
        properties = dict(split_info.connection_properties)
        properties[FETCH_SIZE_PROPERTY] = str(self.config.fetch_size)
        connection = self.driver.connect(split_info.connection_url, properties)
        try:
            connection.set_read_only(True)
        except Exception:
            connection.close()
            raise
        return connection

    def scan(
        self, split: ScanSplit, columns: Sequence[ColumnDescriptor]
    ) -> Iterator[Tuple[Any, ...]]:
        """
        Read the rows of a split.

        Args:
            split: Split to read
            columns: Projected columns

        Returns:
            Iterator over row tuples in projection order
        """
        sql = self.build_split_sql(split, columns)
        with closing(self.open_connection(split.connection)) as connection:
            yield from connection.execute(sql)
