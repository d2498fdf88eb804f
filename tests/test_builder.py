import pytest

from sql_connector.adapters.oracle.dialect import ORACLE_DIALECT
from sql_connector.core.models import (
    BIGINT,
    DATE,
    VARBINARY,
    ColumnDescriptor,
    Domain,
    PredicateSet,
    SchemaTableName,
    TableHandle,
    varchar,
)
from sql_connector.query.builder import SplitQueryBuilder
from sql_connector.query.predicate_compiler import PredicateCompiler

ID = ColumnDescriptor(name="ID", logical_type=BIGINT)
NAME = ColumnDescriptor(name="NAME", logical_type=varchar(30))
HIRED = ColumnDescriptor(name="HIRED", logical_type=DATE)
PHOTO = ColumnDescriptor(name="PHOTO", logical_type=VARBINARY)


def make_table(catalog=None, schema_name="HR"):
    return TableHandle(
        connector_id="test",
        schema_table_name=SchemaTableName(schema_name="hr", table_name="employees"),
        catalog=catalog,
        schema_name=schema_name,
        table_name="EMPLOYEES",
    )


@pytest.fixture
def builder() -> SplitQueryBuilder:
    return SplitQueryBuilder(PredicateCompiler(ORACLE_DIALECT))


def test_projection_without_predicates(builder):
    assert builder.build_sql(make_table(), [ID, NAME]) == 'SELECT "ID", "NAME" FROM "HR"."EMPLOYEES"'


def test_empty_projection_selects_null(builder):
    assert builder.build_sql(make_table(), []) == 'SELECT NULL FROM "HR"."EMPLOYEES"'


def test_missing_qualifiers_are_omitted(builder):
    sql = builder.build_sql(make_table(schema_name=None), [ID])
    assert sql == 'SELECT "ID" FROM "EMPLOYEES"'


def test_catalog_is_included_when_present(builder):
    sql = builder.build_sql(make_table(catalog="ORCL"), [ID])
    assert sql == 'SELECT "ID" FROM "ORCL"."HR"."EMPLOYEES"'


def test_predicates_are_and_ed_in_entry_order(builder):
    predicates = PredicateSet.from_pairs(
        [
            (NAME, Domain.single_value("ACME")),
            (ID, Domain.multiple_values([1, 2])),
        ]
    )
    assert builder.build_sql(make_table(), [ID], predicates) == (
        'SELECT "ID" FROM "HR"."EMPLOYEES" '
        "WHERE \"NAME\" = 'ACME' AND (\"ID\" = 1 OR \"ID\" = 2)"
    )


def test_columns_left_to_the_engine_add_no_clause(builder):
    predicates = PredicateSet.from_pairs([(PHOTO, Domain.single_value(b"\x01"))])
    assert builder.build_sql(make_table(), [PHOTO], predicates) == (
        'SELECT "PHOTO" FROM "HR"."EMPLOYEES"'
    )


def test_unsatisfiable_predicate_set(builder):
    sql = builder.build_sql(make_table(), [ID], PredicateSet.none())
    assert sql == 'SELECT "ID" FROM "HR"."EMPLOYEES" WHERE 1 = 0'


def test_none_domain_on_one_column_makes_query_empty(builder):
    predicates = PredicateSet.from_pairs(
        [(HIRED, Domain.single_value(0)), (ID, Domain.none())]
    )
    assert builder.build_sql(make_table(), [ID], predicates) == (
        'SELECT "ID" FROM "HR"."EMPLOYEES" '
        "WHERE \"HIRED\" = '1970-01-01' AND 1 = 0"
    )


def test_same_input_gives_same_sql(builder):
    predicates = PredicateSet.from_pairs(
        [(ID, Domain.multiple_values([3, 1, 2])), (NAME, Domain.not_null())]
    )
    first = builder.build_sql(make_table(), [NAME, ID], predicates)
    second = builder.build_sql(make_table(), [NAME, ID], predicates)
    assert first == second
