"""
Schema and table discovery.

Runs the external metadata introspection calls, filters out system
namespaces, folds identifier case and resolves logical table names to
physical tables (including synonyms pointing at another owner's table).
"""

import logging
from contextlib import closing
from typing import Dict, List, Mapping, Optional, Set, Tuple

from sql_connector.core.errors import (
    AmbiguousTableError,
    TableNotFoundError,
    UnsupportedSchemaError,
)
from sql_connector.core.interfaces import IDatabaseDriver, IMetadataSource
from sql_connector.core.models import (
    INCLUDE_SYNONYMS_PROPERTY,
    ColumnDescriptor,
    SchemaTableName,
    TableHandle,
    TableRow,
)
from sql_connector.schema.identifiers import IdentifierPolicy
from sql_connector.schema.type_mappings import TypeMapper


# Object kinds a logical table name may resolve to
TABLE_TYPES = ("TABLE", "VIEW", "SYNONYM")


class SchemaDiscovery:
    """
    Discovers schemas, tables and columns of the external database.

    Every operation opens its own connection and closes it before
    returning. Nothing is cached and failures of the metadata calls
    propagate unchanged.
    """

    def __init__(
        self,
        connector_id: str,
        driver: IDatabaseDriver,
        connection_url: str,
        connection_properties: Mapping[str, str],
        identifier_policy: IdentifierPolicy,
        type_mapper: TypeMapper,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize schema discovery.

        Args:
            connector_id: Identity stamped on every table handle
            driver: Database driver used to open metadata connections
            connection_url: URL of the external database
            connection_properties: Base property bag for every connection
            identifier_policy: Case folding and system namespace rules
            type_mapper: Maps reported column types to logical types
            logger: Logger for this discovery instance
        """
        self.connector_id = connector_id
        self.driver = driver
        self.connection_url = connection_url
        self.connection_properties: Dict[str, str] = dict(connection_properties)
        self.identifier_policy = identifier_policy
        self.type_mapper = type_mapper
        self.logger = logger or logging.getLogger(__name__)

    def _connect(self, include_synonyms: bool = False):
        properties = dict(self.connection_properties)
        properties[INCLUDE_SYNONYMS_PROPERTY] = "true" if include_synonyms else "false"
        return closing(self.driver.connect(self.connection_url, properties))

    def _lookup_names(
        self, metadata: IMetadataSource, schema_name: str, table_name: Optional[str]
    ) -> Tuple[str, Optional[str]]:
        """Fold schema and table names to the database's storage case."""
        stores_upper_case = metadata.stores_upper_case_identifiers()
        lookup_schema = self.identifier_policy.normalize_for_lookup(
            schema_name, stores_upper_case
        )
        if table_name is not None:
            if stores_upper_case and not self.identifier_policy.is_system_namespace(schema_name):
                table_name = table_name.upper()
        return lookup_schema, table_name

    def list_schemas(self) -> Set[str]:
        """
        List user schemas.

        Returns:
            Lower-cased names of every schema not in the deny-list
        """
        with self._connect() as connection:
            schemas = set()
            for schema_name in connection.metadata().get_schemas():
                if self.identifier_policy.is_system_namespace(schema_name):
                    continue
                schemas.add(self.identifier_policy.normalize_for_display(schema_name))
        self.logger.debug("Discovered %d schemas", len(schemas))
        return schemas

    def list_tables(self, schema_name: Optional[str] = None) -> List[SchemaTableName]:
        """
        List tables, views and synonyms.

        Args:
            schema_name: Schema to list, or None for every non-system schema

        Returns:
            Logical table names in the order the database reports them
        """
        if schema_name is not None and self.identifier_policy.is_system_namespace(schema_name):
            return []

        with self._connect() as connection:
            metadata = connection.metadata()
            lookup_schema = None
            if schema_name is not None:
                lookup_schema, _ = self._lookup_names(metadata, schema_name, None)
            rows = metadata.get_tables(None, lookup_schema, None, TABLE_TYPES)
            tables = [
                self._schema_table_name(row)
                for row in rows
                if row.schema_name is not None
                and not self.identifier_policy.is_system_namespace(row.schema_name)
            ]
        self.logger.debug(
            "Discovered %d tables in schema %s", len(tables), schema_name or "<all>"
        )
        return tables

    def _schema_table_name(self, row: TableRow) -> SchemaTableName:
        return SchemaTableName(
            schema_name=self.identifier_policy.normalize_for_display(row.schema_name or ""),
            table_name=self.identifier_policy.normalize_for_display(row.table_name),
        )

    def resolve_table(self, schema_table_name: SchemaTableName) -> Optional[TableHandle]:
        """
        Resolve a logical table name to exactly one physical table.

        Args:
            schema_table_name: Logical name requested by the engine

        Returns:
            The table handle, or None when nothing matches

        Raises:
            AmbiguousTableError: If more than one physical object matches
        """
        if self.identifier_policy.is_system_namespace(schema_table_name.schema_name):
            return None

        with self._connect() as connection:
            metadata = connection.metadata()
            lookup_schema, lookup_table = self._lookup_names(
                metadata, schema_table_name.schema_name, schema_table_name.table_name
            )
            handles = [
                TableHandle(
                    connector_id=self.connector_id,
                    schema_table_name=schema_table_name,
                    catalog=row.catalog,
                    schema_name=row.schema_name,
                    table_name=row.table_name,
                )
                for row in metadata.get_tables(
                    None, lookup_schema, lookup_table, TABLE_TYPES
                )
            ]

        if not handles:
            self.logger.debug("No table matched %s", schema_table_name)
            return None
        if len(handles) > 1:
            raise AmbiguousTableError(schema_table_name, len(handles))
        return handles[0]

    def list_columns(self, table: TableHandle) -> List[ColumnDescriptor]:
        """
        List the supported columns of a resolved table.

        Columns of unsupported types are skipped. The connection asks for
        synonym visibility so tables owned by another principal and reached
        through a synonym still report their columns.

        Args:
            table: Resolved table handle

        Returns:
            Column descriptors in the order the database reports them

        Raises:
            TableNotFoundError: If the database reports no columns at all
            UnsupportedSchemaError: If no reported column has a supported type
        """
        found = False
        columns: List[ColumnDescriptor] = []

        with self._connect(include_synonyms=True) as connection:
            metadata = connection.metadata()
            lookup_schema: Optional[str] = table.schema_name
            lookup_table: Optional[str] = table.table_name
            if lookup_schema is not None:
                lookup_schema, lookup_table = self._lookup_names(
                    metadata, lookup_schema, lookup_table
                )
            for row in metadata.get_columns(table.catalog, lookup_schema, lookup_table):
                found = True
                logical_type = self.type_mapper.to_logical_type(row.data_type, row.column_size)
                if logical_type is None:
                    self.logger.debug(
                        "Skipping column %s of %s: unsupported type %s (%s)",
                        row.column_name,
                        table,
                        row.data_type,
                        row.type_name,
                    )
                    continue
                columns.append(ColumnDescriptor(name=row.column_name, logical_type=logical_type))

        if not found:
            raise TableNotFoundError(table.schema_table_name)
        if not columns:
            raise UnsupportedSchemaError(table.schema_table_name)
        return columns
