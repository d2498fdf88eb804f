"""
Predicate compilation.

Turns a per-column Domain into a dialect-correct SQL boolean expression.
"""

import math
from datetime import datetime, timedelta
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict

from sql_connector.core.errors import CompilerContractError
from sql_connector.core.models import EPOCH, Domain, LogicalType, TypeKind, ValueSetKind


# Only these types round-trip correctly through generated literals
PUSHDOWN_TYPES = {
    TypeKind.BIGINT,
    TypeKind.DOUBLE,
    TypeKind.BOOLEAN,
    TypeKind.VARCHAR,
    TypeKind.DATE,
    TypeKind.TIMESTAMP,
}

EPOCH_DATETIME = datetime(EPOCH.year, EPOCH.month, EPOCH.day)


class SqlDialect(BaseModel):
    """
    Literal syntax of one SQL dialect.

    date_literal and timestamp_literal are templates receiving the quoted
    ISO text as {literal}.
    """

    model_config = ConfigDict(frozen=True)

    name: str = "generic"
    date_literal: str = "DATE {literal}"
    timestamp_literal: str = "TIMESTAMP {literal}"
    true_literal: str = "TRUE"
    false_literal: str = "FALSE"
    always_false: str = "1 = 0"


class PredicateCompiler:
    """
    Compiles column domains into SQL fragments.

    Ranges become >=/>/<=/< comparisons, discrete values become equalities,
    the pieces of one column are OR-ed together and an IS NULL disjunct is
    added when the domain admits nulls.
    """

    def __init__(self, dialect: Optional[SqlDialect] = None, identifier_quote: str = '"'):
        """
        Initialize predicate compiler.

        Args:
            dialect: Literal syntax to render with
            identifier_quote: Quote character for identifiers, "" disables quoting
        """
        self.dialect = dialect or SqlDialect()
        self.identifier_quote = identifier_quote

    def quote(self, name: str) -> str:
        quote = self.identifier_quote
        if not quote:
            return name
        return quote + name.replace(quote, quote + quote) + quote

    @staticmethod
    def encode_string(value: str) -> str:
        return "'" + value.replace("'", "''") + "'"

    def supports(self, logical_type: LogicalType) -> bool:
        return logical_type.kind in PUSHDOWN_TYPES

    def compile(
        self, column_name: str, domain: Domain, logical_type: LogicalType
    ) -> Optional[str]:
        """
        Compile one column's domain.

        Args:
            column_name: Physical column name
            domain: Allowed values of the column
            logical_type: Logical type of the column

        Returns:
            SQL fragment, or None when no SQL-level constraint is emitted

        Raises:
            CompilerContractError: If a value does not fit the column type
        """
        if domain.is_all or not self.supports(logical_type):
            return None

        column = self.quote(column_name)
        if domain.kind == ValueSetKind.NONE:
            return f"{column} IS NULL" if domain.null_allowed else self.dialect.always_false
        if domain.kind == ValueSetKind.ALL:
            return f"{column} IS NOT NULL"

        disjuncts: List[List[str]] = []
        single_values = []
        for value_range in domain.ranges:
            if value_range.is_single_value:
                single_values.append(value_range.low)
                continue
            conjuncts = []
            if value_range.low is not None:
                operator = ">=" if value_range.low_inclusive else ">"
                conjuncts.append(
                    self._comparison(column_name, operator, value_range.low, logical_type)
                )
            if value_range.high is not None:
                operator = "<=" if value_range.high_inclusive else "<"
                conjuncts.append(
                    self._comparison(column_name, operator, value_range.high, logical_type)
                )
            if not conjuncts:
                conjuncts.append(f"{column} IS NOT NULL")
            disjuncts.append(conjuncts)

        for value in single_values + list(domain.values):
            disjuncts.append([self._comparison(column_name, "=", value, logical_type)])

        if domain.null_allowed:
            disjuncts.append([f"{column} IS NULL"])

        if len(disjuncts) == 1:
            return " AND ".join(disjuncts[0])
        parts = [
            "(" + " AND ".join(conjuncts) + ")" if len(conjuncts) > 1 else conjuncts[0]
            for conjuncts in disjuncts
        ]
        return "(" + " OR ".join(parts) + ")"

    def _comparison(
        self, column_name: str, operator: str, value: Any, logical_type: LogicalType
    ) -> str:
        literal = self.to_literal(column_name, value, logical_type)
        return f"{self.quote(column_name)} {operator} {literal}"

    def to_literal(self, column_name: str, value: Any, logical_type: LogicalType) -> str:
        """Render a domain value as a SQL literal for the column's type."""
        kind = logical_type.kind
        if kind == TypeKind.VARCHAR:
            if isinstance(value, bytes):
                try:
                    value = value.decode("utf-8")
                except UnicodeDecodeError:
                    raise CompilerContractError(column_name, "text value is not valid UTF-8")
            if not isinstance(value, str):
                raise CompilerContractError(column_name, "expected text", value)
            return self.encode_string(value)
        if kind == TypeKind.BIGINT:
            return str(self._to_int(column_name, value))
        if kind == TypeKind.DOUBLE:
            return repr(self._to_float(column_name, value))
        if kind == TypeKind.BOOLEAN:
            return self.dialect.true_literal if self._to_bool(column_name, value) else self.dialect.false_literal
        if kind == TypeKind.DATE:
            days = self._to_int(column_name, value)
            try:
                day = EPOCH + timedelta(days=days)
            except OverflowError:
                raise CompilerContractError(column_name, "date out of range", value)
            return self.dialect.date_literal.format(literal=self.encode_string(day.isoformat()))
        if kind == TypeKind.TIMESTAMP:
            millis = self._to_int(column_name, value)
            try:
                moment = EPOCH_DATETIME + timedelta(milliseconds=millis)
            except OverflowError:
                raise CompilerContractError(column_name, "timestamp out of range", value)
            # whole seconds only
            text = moment.replace(microsecond=0).isoformat(sep=" ")
            return self.dialect.timestamp_literal.format(literal=self.encode_string(text))
        raise CompilerContractError(column_name, f"type {logical_type} cannot be pushed down")

    @staticmethod
    def _to_int(column_name: str, value: Any) -> int:
        if isinstance(value, bool):
            raise CompilerContractError(column_name, "expected an integer", value)
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                raise CompilerContractError(column_name, "malformed integer", value)
        raise CompilerContractError(column_name, "expected an integer", value)

    @staticmethod
    def _to_float(column_name: str, value: Any) -> float:
        if isinstance(value, bool):
            raise CompilerContractError(column_name, "expected a number", value)
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                raise CompilerContractError(column_name, "malformed number", value)
        else:
            raise CompilerContractError(column_name, "expected a number", value)
        if not math.isfinite(number):
            raise CompilerContractError(column_name, "number is not finite", value)
        return number

    @staticmethod
    def _to_bool(column_name: str, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise CompilerContractError(column_name, "expected a boolean", value)
