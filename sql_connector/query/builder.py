"""
Split query building.

Composes the SELECT statement a worker runs for one scan split.
"""

import logging
from typing import List, Optional, Sequence

from sql_connector.core.models import ColumnDescriptor, PredicateSet, TableHandle
from sql_connector.query.predicate_compiler import PredicateCompiler


class SplitQueryBuilder:
    """
    Builds scan SQL from a table, a projection and a predicate set.

    The output is a pure function of the inputs, so identical inputs give
    identical SQL text, clause order included.
    """

    def __init__(self, compiler: PredicateCompiler, logger: Optional[logging.Logger] = None):
        self.compiler = compiler
        self.logger = logger or logging.getLogger(__name__)

    def build_sql(
        self,
        table: TableHandle,
        columns: Sequence[ColumnDescriptor],
        predicates: Optional[PredicateSet] = None,
    ) -> str:
        """
        Build the scan statement.

        Args:
            table: Resolved table to read
            columns: Projected columns, in output order
            predicates: Pushed-down constraints, AND-ed together

        Returns:
            SQL text
        """
        quote = self.compiler.quote
        projection = ", ".join(quote(column.name) for column in columns) or "NULL"

        source = [quote(part) for part in (table.catalog, table.schema_name) if part]
        source.append(quote(table.table_name))

        sql = f"SELECT {projection} FROM {'.'.join(source)}"
        conjuncts = self.to_conjuncts(PredicateSet.all() if predicates is None else predicates)
        if conjuncts:
            sql += " WHERE " + " AND ".join(conjuncts)

        self.logger.debug("Built SQL for %s: %s", table, sql)
        return sql

    def to_conjuncts(self, predicates: PredicateSet) -> List[str]:
        """Compile every constrained column, skipping those left to the engine."""
        if predicates.is_none:
            return [self.compiler.dialect.always_false]
        conjuncts = []
        for column, domain in predicates.items():
            fragment = self.compiler.compile(column.name, domain, column.logical_type)
            if fragment is not None:
                conjuncts.append(fragment)
        return conjuncts
