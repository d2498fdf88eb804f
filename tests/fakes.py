from typing import Dict, List, Optional, Sequence, Tuple

from sql_connector.core.models import ColumnRow, TableRow


class FakeMetadata:
    """In-memory metadata source recording every call."""

    def __init__(
        self,
        schemas: Sequence[str] = (),
        tables: Sequence[TableRow] = (),
        columns: Optional[Dict[Tuple[str, str], List[ColumnRow]]] = None,
        upper_case: bool = True,
        error: Optional[Exception] = None,
    ):
        self.schemas = list(schemas)
        self.tables = list(tables)
        self.columns = columns or {}
        self.upper_case = upper_case
        self.error = error
        self.calls: List[tuple] = []

    def _maybe_fail(self):
        if self.error is not None:
            raise self.error

    def stores_upper_case_identifiers(self) -> bool:
        return self.upper_case

    def get_schemas(self):
        self.calls.append(("get_schemas",))
        self._maybe_fail()
        return list(self.schemas)

    def get_tables(self, catalog, schema_name, table_name, table_types):
        self.calls.append(("get_tables", catalog, schema_name, table_name, tuple(table_types)))
        self._maybe_fail()
        return [
            row
            for row in self.tables
            if (schema_name is None or row.schema_name == schema_name)
            and (table_name is None or row.table_name == table_name)
            and row.table_type in table_types
        ]

    def get_columns(self, catalog, schema_name, table_name):
        self.calls.append(("get_columns", catalog, schema_name, table_name))
        self._maybe_fail()
        return list(self.columns.get((schema_name, table_name), []))


class FakeConnection:
    def __init__(self, metadata: FakeMetadata, rows=(), fail_read_only: bool = False):
        self._metadata = metadata
        self.rows = list(rows)
        self.fail_read_only = fail_read_only
        self.read_only: Optional[bool] = None
        self.executed: List[str] = []
        self.closed = False

    def metadata(self) -> FakeMetadata:
        return self._metadata

    def set_read_only(self, read_only: bool) -> None:
        if self.fail_read_only:
            raise RuntimeError("read-only refused")
        self.read_only = read_only

    def execute(self, sql: str):
        self.executed.append(sql)
        return iter(self.rows)

    def close(self) -> None:
        self.closed = True


class FakeDriver:
    """Hands out FakeConnections and records the properties they were opened with."""

    def __init__(self, metadata: Optional[FakeMetadata] = None, rows=(), fail_read_only: bool = False):
        self.metadata = metadata or FakeMetadata()
        self.rows = rows
        self.fail_read_only = fail_read_only
        self.calls: List[Tuple[str, Dict[str, str]]] = []
        self.connections: List[FakeConnection] = []

    def connect(self, url, properties):
        self.calls.append((url, dict(properties)))
        connection = FakeConnection(self.metadata, self.rows, self.fail_read_only)
        self.connections.append(connection)
        return connection

    @property
    def all_closed(self) -> bool:
        return all(connection.closed for connection in self.connections)
