"""
Shared data models for the connector.

Logical types, catalog identifiers, per-column value constraints and the
rows reported by the external database's metadata capability.
"""

from datetime import date
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# Largest declared length a varchar logical type can carry
MAX_VARCHAR_LENGTH = 2**31 - 1

# Epoch used by the engine's internal date/timestamp representation
EPOCH = date(1970, 1, 1)

# Connection property bag keys understood by every driver
USER_PROPERTY = "user"
PASSWORD_PROPERTY = "password"
FETCH_SIZE_PROPERTY = "fetch_size"
INCLUDE_SYNONYMS_PROPERTY = "include_synonyms"


class TypeKind(str, Enum):
    """Logical type tags used by the query engine."""

    BOOLEAN = "boolean"
    BIGINT = "bigint"
    DOUBLE = "double"
    VARCHAR = "varchar"
    VARBINARY = "varbinary"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"


class LogicalType(BaseModel):
    """Engine-side column type. Only varchar carries a length."""

    model_config = ConfigDict(frozen=True)

    kind: TypeKind
    length: Optional[int] = None

    @model_validator(mode="after")
    def validate_length(self) -> "LogicalType":
        if self.length is not None:
            if self.kind != TypeKind.VARCHAR:
                raise ValueError(f"Type {self.kind.value} does not take a length")
            if not 0 < self.length <= MAX_VARCHAR_LENGTH:
                raise ValueError(f"Invalid varchar length: {self.length}")
        return self

    @property
    def is_unbounded(self) -> bool:
        return self.length is None

    def __str__(self) -> str:
        if self.length is not None:
            return f"{self.kind.value}({self.length})"
        return self.kind.value


BOOLEAN = LogicalType(kind=TypeKind.BOOLEAN)
BIGINT = LogicalType(kind=TypeKind.BIGINT)
DOUBLE = LogicalType(kind=TypeKind.DOUBLE)
VARCHAR = LogicalType(kind=TypeKind.VARCHAR)
VARBINARY = LogicalType(kind=TypeKind.VARBINARY)
DATE = LogicalType(kind=TypeKind.DATE)
TIME = LogicalType(kind=TypeKind.TIME)
TIMESTAMP = LogicalType(kind=TypeKind.TIMESTAMP)


def varchar(length: Optional[int] = None) -> LogicalType:
    """Create a varchar type, unbounded when length is None."""
    if length is None:
        return VARCHAR
    return LogicalType(kind=TypeKind.VARCHAR, length=length)


class SchemaTableName(BaseModel):
    """Engine-facing table identifier. Always lower case."""

    model_config = ConfigDict(frozen=True)

    schema_name: str
    table_name: str

    @field_validator("schema_name", "table_name")
    @classmethod
    def lower_case(cls, value: str) -> str:
        if not value:
            raise ValueError("Schema and table names must not be empty")
        return value.lower()

    def __str__(self) -> str:
        return f"{self.schema_name}.{self.table_name}"


class TableHandle(BaseModel):
    """
    One resolved physical table.

    catalog/schema_name/table_name are the physical identifiers as reported
    by the external database metadata; schema_table_name is the logical name
    the handle was resolved from.
    """

    model_config = ConfigDict(frozen=True)

    connector_id: str
    schema_table_name: SchemaTableName
    catalog: Optional[str] = None
    schema_name: Optional[str] = None
    table_name: str

    def __str__(self) -> str:
        parts = [p for p in (self.catalog, self.schema_name, self.table_name) if p]
        return ".".join(parts)


class ColumnDescriptor(BaseModel):
    """A column of a resolved table with its logical type."""

    model_config = ConfigDict(frozen=True)

    name: str
    logical_type: LogicalType


class ValueSetKind(str, Enum):
    ALL = "all"
    NONE = "none"
    SOME = "some"


class Range(BaseModel):
    """
    A contiguous range of values. A None bound is unbounded on that side.

    Values are in the engine's internal representation: days since epoch for
    dates, milliseconds since epoch for timestamps.
    """

    model_config = ConfigDict(frozen=True)

    low: Optional[Any] = None
    low_inclusive: bool = False
    high: Optional[Any] = None
    high_inclusive: bool = False

    @model_validator(mode="after")
    def validate_bounds(self) -> "Range":
        if self.low is None and self.low_inclusive:
            raise ValueError("Unbounded low side cannot be inclusive")
        if self.high is None and self.high_inclusive:
            raise ValueError("Unbounded high side cannot be inclusive")
        if self.low is not None and self.high is not None:
            try:
                inverted = self.low > self.high
            except TypeError:
                raise ValueError(f"Range bounds are not comparable: {self.low!r}, {self.high!r}")
            if inverted:
                raise ValueError(f"Range low bound {self.low!r} is above high bound {self.high!r}")
            if self.low == self.high and not (self.low_inclusive and self.high_inclusive):
                raise ValueError(f"Range on a single value {self.low!r} must be inclusive on both sides")
        return self

    @classmethod
    def equal(cls, value: Any) -> "Range":
        return cls(low=value, low_inclusive=True, high=value, high_inclusive=True)

    @classmethod
    def greater_than(cls, value: Any) -> "Range":
        return cls(low=value)

    @classmethod
    def greater_than_or_equal(cls, value: Any) -> "Range":
        return cls(low=value, low_inclusive=True)

    @classmethod
    def less_than(cls, value: Any) -> "Range":
        return cls(high=value)

    @classmethod
    def less_than_or_equal(cls, value: Any) -> "Range":
        return cls(high=value, high_inclusive=True)

    @classmethod
    def between(
        cls,
        low: Any,
        high: Any,
        low_inclusive: bool = True,
        high_inclusive: bool = True,
    ) -> "Range":
        return cls(
            low=low,
            low_inclusive=low_inclusive,
            high=high,
            high_inclusive=high_inclusive,
        )

    @property
    def is_single_value(self) -> bool:
        return (
            self.low is not None
            and self.low_inclusive
            and self.high_inclusive
            and self.low == self.high
        )


class Domain(BaseModel):
    """
    Values a single column is allowed to take.

    A SOME domain is the union of its ranges and discrete values; nulls
    satisfy the domain only when null_allowed is set.
    """

    model_config = ConfigDict(frozen=True)

    kind: ValueSetKind = ValueSetKind.SOME
    ranges: List[Range] = Field(default_factory=list)
    values: List[Any] = Field(default_factory=list)
    null_allowed: bool = False

    @model_validator(mode="after")
    def validate_value_set(self) -> "Domain":
        if self.kind == ValueSetKind.SOME:
            if not self.ranges and not self.values:
                raise ValueError("A SOME domain needs at least one range or value")
        elif self.ranges or self.values:
            raise ValueError(f"A {self.kind.value.upper()} domain cannot carry ranges or values")
        return self

    @classmethod
    def all(cls) -> "Domain":
        return cls(kind=ValueSetKind.ALL, null_allowed=True)

    @classmethod
    def not_null(cls) -> "Domain":
        return cls(kind=ValueSetKind.ALL, null_allowed=False)

    @classmethod
    def none(cls) -> "Domain":
        return cls(kind=ValueSetKind.NONE, null_allowed=False)

    @classmethod
    def only_null(cls) -> "Domain":
        return cls(kind=ValueSetKind.NONE, null_allowed=True)

    @classmethod
    def single_value(cls, value: Any, null_allowed: bool = False) -> "Domain":
        return cls(values=[value], null_allowed=null_allowed)

    @classmethod
    def multiple_values(cls, values: Sequence[Any], null_allowed: bool = False) -> "Domain":
        return cls(values=list(values), null_allowed=null_allowed)

    @classmethod
    def of_ranges(cls, *ranges: Range, null_allowed: bool = False) -> "Domain":
        return cls(ranges=list(ranges), null_allowed=null_allowed)

    @property
    def is_all(self) -> bool:
        return self.kind == ValueSetKind.ALL and self.null_allowed


class ColumnConstraint(BaseModel):
    model_config = ConfigDict(frozen=True)

    column: ColumnDescriptor
    domain: Domain


class PredicateSet(BaseModel):
    """
    Conjunction of per-column domains.

    Entries keep insertion order, which only affects the order of the
    generated SQL text. is_none marks a conjunction no row can satisfy.
    """

    model_config = ConfigDict(frozen=True)

    entries: List[ColumnConstraint] = Field(default_factory=list)
    is_none: bool = False

    @model_validator(mode="after")
    def validate_entries(self) -> "PredicateSet":
        names = [entry.column.name for entry in self.entries]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Columns constrained more than once: {duplicates}")
        return self

    @classmethod
    def all(cls) -> "PredicateSet":
        return cls()

    @classmethod
    def none(cls) -> "PredicateSet":
        return cls(is_none=True)

    @classmethod
    def from_pairs(
        cls, pairs: Sequence[Tuple[ColumnDescriptor, Domain]]
    ) -> "PredicateSet":
        """Build from (column, domain) pairs, dropping unconstrained columns."""
        return cls(
            entries=[
                ColumnConstraint(column=column, domain=domain)
                for column, domain in pairs
                if not domain.is_all
            ]
        )

    def get(self, column: ColumnDescriptor) -> Optional[Domain]:
        for entry in self.entries:
            if entry.column == column:
                return entry.domain
        return None

    def items(self) -> Iterator[Tuple[ColumnDescriptor, Domain]]:
        for entry in self.entries:
            yield entry.column, entry.domain

    def __len__(self) -> int:
        return len(self.entries)


class TableRow(BaseModel):
    """A table, view or synonym reported by table enumeration."""

    catalog: Optional[str] = None
    schema_name: Optional[str] = None
    table_name: str
    table_type: str = "TABLE"


class ColumnRow(BaseModel):
    """A column reported by column enumeration."""

    column_name: str
    data_type: int
    type_name: Optional[str] = None
    column_size: Optional[int] = None


class SplitConnectionInfo(BaseModel):
    """Everything a worker needs to open its own connection."""

    model_config = ConfigDict(frozen=True)

    connection_url: str
    connection_properties: Dict[str, str] = Field(default_factory=dict)


class ScanSplit(BaseModel):
    """A unit of scan work: one table, one pushed-down predicate."""

    model_config = ConfigDict(frozen=True)

    connector_id: str
    connection: SplitConnectionInfo
    table: TableHandle
    predicates: PredicateSet = Field(default_factory=PredicateSet)
