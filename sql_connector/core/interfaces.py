"""
Abstract interfaces for the external database capabilities.

These protocols describe what the connector needs from a database client:
open a connection given a URL and a property bag, enumerate metadata, and
run generated SQL. Dialect adapters implement them; tests fake them.
"""

from typing import Any, Iterable, Iterator, Mapping, Optional, Protocol, Sequence, Tuple

from sql_connector.core.models import ColumnRow, TableRow


class IMetadataSource(Protocol):
    """
    Database-level metadata of one open connection.

    Name arguments are exact physical names; None means "any".
    """

    def stores_upper_case_identifiers(self) -> bool:
        """Whether unquoted identifiers are stored folded to upper case."""
        ...

    def get_schemas(self) -> Iterable[str]:
        """Return all schema names visible to the connected principal."""
        ...

    def get_tables(
        self,
        catalog: Optional[str],
        schema_name: Optional[str],
        table_name: Optional[str],
        table_types: Sequence[str],
    ) -> Iterable[TableRow]:
        """
        Enumerate tables.

        Args:
            catalog: Catalog to restrict to
            schema_name: Schema (owner) to restrict to
            table_name: Table name to restrict to
            table_types: Object kinds to return (e.g. TABLE, VIEW, SYNONYM)

        Returns:
            Matching rows in the order the database reports them
        """
        ...

    def get_columns(
        self,
        catalog: Optional[str],
        schema_name: Optional[str],
        table_name: Optional[str],
    ) -> Iterable[ColumnRow]:
        """Enumerate the columns of the matching tables."""
        ...


class IConnection(Protocol):
    """An open connection to the external database."""

    def metadata(self) -> IMetadataSource:
        ...

    def set_read_only(self, read_only: bool) -> None:
        ...

    def execute(self, sql: str) -> Iterator[Tuple[Any, ...]]:
        """Run a query and iterate over its rows."""
        ...

    def close(self) -> None:
        ...


class IDatabaseDriver(Protocol):
    """Opens connections to the external database."""

    def connect(self, url: str, properties: Mapping[str, str]) -> IConnection:
        """
        Open a new connection.

        Args:
            url: Database URL
            properties: Property bag (user, password, fetch_size,
                include_synonyms)

        Returns:
            An open connection the caller must close
        """
        ...
