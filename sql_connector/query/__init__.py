"""Predicate compilation and scan query building."""

from sql_connector.query.predicate_compiler import PredicateCompiler, SqlDialect
from sql_connector.query.builder import SplitQueryBuilder

__all__ = ["PredicateCompiler", "SqlDialect", "SplitQueryBuilder"]
