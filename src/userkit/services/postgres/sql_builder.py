"""
Parameterised SQL construction for entity tables.

Every statement is built from an explicit TableMapping. Identifiers only ever
come from the mapping; caller-supplied values only ever travel as $n bind
parameters. A lookup key outside the mapping's allow-list is rejected before
any SQL is produced.

Usage:
    sql, params = build_select(USER_TABLE, {"email": "a@b.co"})
    row = await db.fetchrow(sql, *params)
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ...exceptions import InvalidQuery


@dataclass(frozen=True)
class TableMapping:
    """
    Static description of how an entity is stored.

    Attributes:
        name: Table name
        primary_key: Primary key column
        insert_columns: Columns written by create, in bind order
        conflict_target: Natural key whose uniqueness conflict makes an insert a no-op
        queryable: Allow-list of columns accepted in lookup predicates, with the
            Python type a lookup value must have
        empty_as_null: Text columns whose empty-string value is stored as NULL
    """

    name: str
    primary_key: str
    insert_columns: tuple[str, ...]
    conflict_target: str | None = None
    queryable: Mapping[str, type] = field(default_factory=dict)
    empty_as_null: frozenset[str] = frozenset()

    def __post_init__(self):
        declared = set(self.empty_as_null) | set(self.queryable)
        if self.conflict_target:
            declared.add(self.conflict_target)
        unknown = declared - set(self.insert_columns) - {self.primary_key}
        if unknown:
            raise ValueError(f"{self.name}: columns not in insert_columns: {sorted(unknown)}")


def quote_identifier(name: str) -> str:
    """Quote a trusted identifier taken from a TableMapping."""
    return '"' + name.replace('"', '""') + '"'


def build_insert(table: TableMapping, row: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """
    Build an INSERT ... RETURNING * statement.

    With a conflict_target the insert becomes ON CONFLICT DO NOTHING: a
    colliding natural key yields no returned row instead of an error.

    Args:
        table: Table mapping
        row: Column -> value for exactly table.insert_columns

    Returns:
        Tuple of (sql, params)
    """
    missing = set(table.insert_columns) - set(row)
    extra = set(row) - set(table.insert_columns)
    if missing or extra:
        raise ValueError(
            f"{table.name}: row does not match insert columns "
            f"(missing={sorted(missing)}, extra={sorted(extra)})"
        )

    columns = ", ".join(quote_identifier(c) for c in table.insert_columns)
    placeholders = []
    params = []
    for index, column in enumerate(table.insert_columns, start=1):
        placeholder = f"${index}"
        if column in table.empty_as_null:
            placeholder = f"NULLIF({placeholder}, '')"
        placeholders.append(placeholder)
        params.append(row[column])

    sql = f"INSERT INTO {quote_identifier(table.name)} ({columns}) VALUES ({', '.join(placeholders)})"
    if table.conflict_target:
        sql += f" ON CONFLICT ({quote_identifier(table.conflict_target)}) DO NOTHING"
    sql += " RETURNING *"
    return sql, params


def build_select_by_pk(table: TableMapping, pk_value: Any) -> tuple[str, list[Any]]:
    """Build a SELECT for one row by primary key."""
    sql = (
        f"SELECT * FROM {quote_identifier(table.name)} "
        f"WHERE {quote_identifier(table.primary_key)} = $1"
    )
    return sql, [pk_value]


def build_select(table: TableMapping, filters: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """
    Build a SELECT matching a conjunction of column = value constraints.

    Args:
        table: Table mapping
        filters: Column -> value; every column must be in table.queryable and
            every value of the type declared there

    Returns:
        Tuple of (sql, params)

    Raises:
        InvalidQuery: Empty filters, a column outside the allow-list, a value
            of the wrong type, or text containing NUL

    Example:
        >>> build_select(USER_TABLE, {"email": "a@b.co"})
        ('SELECT * FROM "user_information" WHERE "email" = $1 LIMIT 1', ['a@b.co'])
    """
    if not filters:
        raise InvalidQuery("At least one lookup field is required")

    clauses = []
    params = []
    for column, value in filters.items():
        if column not in table.queryable:
            raise InvalidQuery(f"Field '{column}' cannot be used for lookups", field=column)
        expected = table.queryable[column]
        if not isinstance(value, expected) or isinstance(value, bool):
            raise InvalidQuery(
                f"Field '{column}' requires a {expected.__name__} value", field=column
            )
        if isinstance(value, str) and "\x00" in value:
            raise InvalidQuery(f"Field '{column}' contains a NUL character", field=column)
        params.append(value)
        clauses.append(f"{quote_identifier(column)} = ${len(params)}")

    sql = f"SELECT * FROM {quote_identifier(table.name)} WHERE {' AND '.join(clauses)} LIMIT 1"
    return sql, params
