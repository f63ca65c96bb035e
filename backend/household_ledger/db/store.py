from typing import Any, Literal, Protocol, Sequence

import psycopg
from psycopg import sql

from household_ledger.core.errors import DataAccessError, InvalidFilterError
from household_ledger.pagination.filters import AnyOf, Condition, Equals, Range, condition_fields

# Public field name -> column on the transactions table (alias t).
FILTERABLE_COLUMNS = {
    "id": "id",
    "owner_user_id": "owner_user_id",
    "group_id": "group_id",
    "account_id": "account_id",
    "category_id": "category_id",
    "tag_id": "tag_id",
    "type": "type",
    "amount": "amount",
    "date": "date",
    "created_at": "created_at",
}

_RANGE_SQL = {"gte": ">=", "lte": "<=", "gt": ">", "lt": "<"}

_SELECT_ROWS = sql.SQL(
    """
    SELECT t.id,
           t.owner_user_id,
           t.group_id,
           t.account_id,
           t.category_id,
           c.name AS category_name,
           c.color AS category_color,
           t.tag_id,
           t.type,
           t.amount,
           t.memo,
           t.date,
           t.created_at
    FROM transactions t
    LEFT JOIN categories c ON c.id=t.category_id
    WHERE t.deleted_at IS NULL
      AND {where}
    ORDER BY t.id {direction}
    LIMIT %s
    """
)

_SELECT_EXISTS = sql.SQL(
    """
    SELECT t.id
    FROM transactions t
    WHERE t.deleted_at IS NULL
      AND {where}
    ORDER BY t.id ASC
    LIMIT 1
    """
)

_SELECT_COUNT = sql.SQL(
    """
    SELECT COUNT(*) AS total
    FROM transactions t
    WHERE t.deleted_at IS NULL
      AND {where}
    """
)


class TransactionStore(Protocol):
    def find_many(self, where: Sequence[Condition], order: Literal["asc", "desc"], take: int) -> list[dict[str, Any]]: ...

    def find_first(self, where: Sequence[Condition]) -> dict[str, Any] | None: ...

    def count(self, where: Sequence[Condition]) -> int: ...


def _column(field: str) -> sql.Composable:
    column = FILTERABLE_COLUMNS.get(field)
    if column is None:
        raise InvalidFilterError(field, "unknown field")
    return sql.Identifier("t", column)


def compile_condition(cond: Condition, params: list[Any]) -> sql.Composable:
    if isinstance(cond, Equals):
        params.append(cond.value)
        return sql.SQL("{} = %s").format(_column(cond.field))
    if isinstance(cond, Range):
        bounds = cond.bounds()
        if not bounds:
            raise InvalidFilterError(cond.field, "range needs at least one bound")
        column = _column(cond.field)
        parts = []
        for op, value in bounds:
            params.append(value)
            parts.append(sql.SQL("{} " + _RANGE_SQL[op] + " %s").format(column))
        return sql.SQL("({})").format(sql.SQL(" AND ").join(parts))
    if isinstance(cond, AnyOf):
        if not cond.conditions:
            raise InvalidFilterError("(any)", "empty OR group")
        return sql.SQL("({})").format(sql.SQL(" OR ").join(compile_condition(c, params) for c in cond.conditions))
    raise TypeError(f"unsupported condition {cond!r}")


def compile_where(where: Sequence[Condition]) -> tuple[sql.Composable, list[Any]]:
    params: list[Any] = []
    if not where:
        return sql.SQL("TRUE"), params
    parts = [compile_condition(c, params) for c in where]
    return sql.SQL(" AND ").join(parts), params


class PgTransactionStore:
    """Transaction reads over a psycopg cursor opened with ``dict_row``."""

    def __init__(self, cur) -> None:
        self.cur = cur

    def _run(self, operation: str, query: sql.Composable, params: list[Any]) -> None:
        try:
            self.cur.execute(query, params)
        except psycopg.Error as exc:
            raise DataAccessError(operation, str(exc).strip() or type(exc).__name__) from exc

    def find_many(self, where: Sequence[Condition], order: Literal["asc", "desc"], take: int) -> list[dict[str, Any]]:
        if order not in ("asc", "desc"):
            raise ValueError(f"order must be asc or desc, got {order!r}")
        clause, params = compile_where(where)
        query = _SELECT_ROWS.format(where=clause, direction=sql.SQL(order.upper()))
        self._run("find_many", query, [*params, int(take)])
        return list(self.cur.fetchall())

    def find_first(self, where: Sequence[Condition]) -> dict[str, Any] | None:
        clause, params = compile_where(where)
        self._run("find_first", _SELECT_EXISTS.format(where=clause), params)
        return self.cur.fetchone()

    def count(self, where: Sequence[Condition]) -> int:
        clause, params = compile_where(where)
        self._run("count", _SELECT_COUNT.format(where=clause), params)
        row = self.cur.fetchone()
        return int(row["total"] or 0) if row else 0


def validate_filter_fields(where: Sequence[Condition]) -> None:
    for field in condition_fields(where):
        _column(field)
