from types import SimpleNamespace

import pytest

from sql_connector.adapters.oracle import driver as oracle_driver
from sql_connector.adapters.oracle.dialect import (
    ORACLE_INTERVALDS,
    ORACLE_INTERVALYM,
    ORACLE_TIMESTAMPLTZ,
    ORACLE_TIMESTAMPTZ,
    oracle_column_size,
    oracle_type_code,
    oracle_type_mapper,
)
from sql_connector.adapters.oracle.driver import OracleConnection, OracleDriver, to_sqlalchemy_url
from sql_connector.adapters.oracle.metadata import OracleMetadataSource
from sql_connector.core.models import BIGINT, DOUBLE, TIMESTAMP, VARBINARY, ColumnRow, TableRow, varchar
from sql_connector.schema.type_mappings import ExternalType


@pytest.mark.parametrize(
    "type_name, expected",
    [
        ("NUMBER", ExternalType.DECIMAL),
        ("varchar2", ExternalType.VARCHAR),
        ("NVARCHAR2", ExternalType.NVARCHAR),
        ("DATE", ExternalType.DATE),
        ("TIMESTAMP(6)", ExternalType.TIMESTAMP),
        ("TIMESTAMP(6) WITH TIME ZONE", ORACLE_TIMESTAMPTZ),
        ("TIMESTAMP(6) WITH LOCAL TIME ZONE", ORACLE_TIMESTAMPLTZ),
        ("INTERVAL YEAR(2) TO MONTH", ORACLE_INTERVALYM),
        ("INTERVAL DAY(2) TO SECOND(6)", ORACLE_INTERVALDS),
        ("SDO_GEOMETRY", ExternalType.OTHER),
        ("ROWID", ExternalType.ROWID),
    ],
)
def test_oracle_type_codes(type_name, expected):
    assert oracle_type_code(type_name) == expected


@pytest.mark.parametrize(
    "type_name, expected",
    [
        ("NUMBER", DOUBLE),
        ("VARCHAR2", varchar(30)),
        ("TIMESTAMP(3)", TIMESTAMP),
        ("RAW", VARBINARY),
        ("CLOB", varchar()),
        ("TIMESTAMP(6) WITH TIME ZONE", None),
        ("INTERVAL DAY(2) TO SECOND(6)", None),
        ("ROWID", None),
    ],
)
def test_oracle_types_through_mapper(type_name, expected):
    code = oracle_type_code(type_name)
    size = oracle_column_size(type_name, 120, 30, None)
    assert oracle_type_mapper().to_logical_type(code, size) == expected


def test_column_size_prefers_character_length():
    assert oracle_column_size("VARCHAR2", 120, 30, None) == 30
    assert oracle_column_size("CHAR", 4, 0, None) == 4
    assert oracle_column_size("NUMBER", 22, 0, 10) == 10
    assert oracle_column_size("RAW", 16, 0, None) == 16


@pytest.mark.parametrize(
    "url, expected",
    [
        ("jdbc:oracle:thin:@db.local:1521:ORCL", "oracle+oracledb://db.local:1521/ORCL"),
        (
            "jdbc:oracle:thin:@//db.local:1521/orclpdb",
            "oracle+oracledb://db.local:1521/?service_name=orclpdb",
        ),
        ("oracle+oracledb://scott@db/ORCL", "oracle+oracledb://scott@db/ORCL"),
    ],
)
def test_to_sqlalchemy_url(url, expected):
    assert to_sqlalchemy_url(url) == expected


@pytest.mark.parametrize(
    "url", ["jdbc:oracle:thin:@db.local:1521", "jdbc:oracle:thin:@//db.local:1521", "jdbc:oracle:thin:@::"]
)
def test_malformed_thin_urls_are_rejected(url):
    with pytest.raises(ValueError, match="Invalid Oracle"):
        to_sqlalchemy_url(url)


class FakeSqlConnection:
    def __init__(self, rows):
        self.rows = rows
        self.statements = []

    def execute(self, statement, parameters=None):
        self.statements.append((str(statement), parameters))
        return iter(self.rows)


def test_metadata_source_lists_schemas():
    connection = FakeSqlConnection([("HR",), ("SYS",)])
    source = OracleMetadataSource(connection)
    assert source.stores_upper_case_identifiers()
    assert source.get_schemas() == ["HR", "SYS"]


def test_metadata_source_lists_tables():
    connection = FakeSqlConnection(
        [SimpleNamespace(table_cat=None, table_schem="HR", table_name="EMP", table_type="VIEW")]
    )

    rows = OracleMetadataSource(connection).get_tables(None, "HR", None, ("TABLE", "VIEW"))

    assert rows == [TableRow(schema_name="HR", table_name="EMP", table_type="VIEW")]
    sql, parameters = connection.statements[0]
    assert "all_objects" in sql
    assert parameters == {"table_types": ["TABLE", "VIEW"], "owner": "HR", "table_name": None}


def test_metadata_source_reports_column_codes():
    connection = FakeSqlConnection(
        [
            SimpleNamespace(
                column_name="NAME",
                data_type="VARCHAR2",
                data_length=120,
                char_length=30,
                data_precision=None,
            ),
            SimpleNamespace(
                column_name="ID",
                data_type="NUMBER",
                data_length=22,
                char_length=0,
                data_precision=10,
            ),
        ]
    )

    columns = OracleMetadataSource(connection).get_columns(None, "HR", "EMP")

    assert columns == [
        ColumnRow(column_name="NAME", data_type=ExternalType.VARCHAR, type_name="VARCHAR2", column_size=30),
        ColumnRow(column_name="ID", data_type=ExternalType.DECIMAL, type_name="NUMBER", column_size=10),
    ]
    sql, _ = connection.statements[0]
    assert "all_synonyms" not in sql


def test_metadata_source_follows_synonyms_when_asked():
    connection = FakeSqlConnection([])
    OracleMetadataSource(connection, include_synonyms=True).get_columns(None, "HR", "EMP_SYN")
    sql, parameters = connection.statements[0]
    assert "UNION ALL" in sql
    assert "all_synonyms" in sql
    assert parameters == {"owner": "HR", "table_name": "EMP_SYN"}


class FakeResult:
    def __init__(self, rows):
        self.rows = list(rows)
        self.closed = False

    def fetchmany(self, size):
        batch, self.rows = self.rows[:size], self.rows[size:]
        return batch

    def close(self):
        self.closed = True


class FakeEngineConnection:
    def __init__(self, rows=()):
        self.result = FakeResult(rows)
        self.driver_sql = []
        self.closed = False

    def exec_driver_sql(self, sql):
        self.driver_sql.append(sql)
        return self.result

    def close(self):
        self.closed = True


class FakeEngine:
    def __init__(self, connection=None, error=None):
        self._connection = connection or FakeEngineConnection()
        self.error = error
        self.disposed = False
        self.url = SimpleNamespace(render_as_string=lambda hide_password: "oracle+oracledb://db")

    def connect(self):
        if self.error is not None:
            raise self.error
        return self._connection

    def dispose(self):
        self.disposed = True


def test_connection_reads_in_fetch_size_batches():
    engine_connection = FakeEngineConnection([(1,), (2,), (3,)])
    connection = OracleConnection(FakeEngine(engine_connection), engine_connection, fetch_size=2)

    rows = list(connection.execute("SELECT 1 FROM dual"))

    assert rows == [(1,), (2,), (3,)]
    assert engine_connection.driver_sql == ["SELECT 1 FROM dual"]
    assert engine_connection.result.closed


def test_connection_read_only_and_close():
    engine = FakeEngine()
    engine_connection = engine._connection
    connection = OracleConnection(engine, engine_connection)

    connection.set_read_only(True)
    connection.close()

    assert engine_connection.driver_sql == ["SET TRANSACTION READ ONLY"]
    assert engine_connection.closed
    assert engine.disposed


def test_driver_passes_properties_to_engine(monkeypatch):
    created = {}
    engine = FakeEngine()

    def fake_create_engine(url, **kwargs):
        created.update(kwargs, url=url)
        return engine

    monkeypatch.setattr(oracle_driver, "create_engine", fake_create_engine)

    connection = OracleDriver().connect(
        "jdbc:oracle:thin:@db:1521:ORCL",
        {"user": "scott", "password": "tiger", "fetch_size": "500", "include_synonyms": "true"},
    )

    assert created["url"] == "oracle+oracledb://db:1521/ORCL"
    assert created["arraysize"] == 500
    assert created["connect_args"] == {"user": "scott", "password": "tiger"}
    assert connection.fetch_size == 500
    assert connection.include_synonyms is True
    assert connection.metadata().include_synonyms is True


def test_driver_disposes_engine_when_connect_fails(monkeypatch):
    engine = FakeEngine(error=ConnectionError("listener down"))
    monkeypatch.setattr(oracle_driver, "create_engine", lambda url, **kwargs: engine)

    with pytest.raises(ConnectionError, match="listener down"):
        OracleDriver().connect("oracle+oracledb://db/ORCL", {})
    assert engine.disposed
