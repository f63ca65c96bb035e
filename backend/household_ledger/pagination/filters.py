from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union

from household_ledger.core.errors import InvalidFilterError, InvalidPageRequestError

RANGE_OPERATORS = ("gte", "lte", "gt", "lt")


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class Range:
    field: str
    gte: Any = None
    lte: Any = None
    gt: Any = None
    lt: Any = None

    def bounds(self) -> list[tuple[str, Any]]:
        return [(op, getattr(self, op)) for op in RANGE_OPERATORS if getattr(self, op) is not None]


@dataclass(frozen=True)
class AnyOf:
    conditions: tuple["Condition", ...]


Condition = Union[Equals, Range, AnyOf]


@dataclass(frozen=True)
class OwnerScope:
    """Rows owned by a user, or shared with the user's group."""

    owner_user_id: int
    group_id: int | None = None

    def condition(self) -> Condition:
        own = Equals("owner_user_id", self.owner_user_id)
        if self.group_id is None:
            return own
        return AnyOf((Equals("group_id", self.group_id), own))

    def log_context(self) -> dict[str, Any]:
        return {"owner_user_id": self.owner_user_id, "group_id": self.group_id}


def require_scope(scope: OwnerScope | None) -> OwnerScope:
    if scope is None:
        raise InvalidPageRequestError("owner scope is required")
    if not isinstance(scope, OwnerScope):
        raise InvalidPageRequestError(f"owner scope must be an OwnerScope, got {type(scope).__name__}")
    return scope


def parse_filters(filters: Mapping[str, Any] | None) -> list[Condition]:
    """Turn ``{field: value | {gte, lte, gt, lt}}`` into AND-able conditions.

    ``None`` values are skipped so optional query fields can be passed through
    unchanged. Range dicts must use only the four known operators and carry at
    least one bound.
    """
    if not filters:
        return []
    parsed: list[Condition] = []
    for field, value in filters.items():
        if value is None:
            continue
        if field == "id":
            raise InvalidFilterError(field, "id is reserved for the cursor")
        if isinstance(value, Mapping):
            unknown = sorted(set(value) - set(RANGE_OPERATORS))
            if unknown:
                raise InvalidFilterError(field, f"unsupported operators {', '.join(unknown)}")
            bounds = {op: value[op] for op in RANGE_OPERATORS if value.get(op) is not None}
            if not bounds:
                raise InvalidFilterError(field, "range needs at least one bound")
            parsed.append(Range(field, **bounds))
        elif isinstance(value, (list, tuple, set)):
            raise InvalidFilterError(field, "list values are not supported")
        else:
            parsed.append(Equals(field, value))
    return parsed


def combine(scope: OwnerScope, filters: Iterable[Condition], *extra: Condition | None) -> list[Condition]:
    conditions = [scope.condition(), *filters]
    conditions.extend(c for c in extra if c is not None)
    return conditions


def condition_fields(conditions: Iterable[Condition]) -> set[str]:
    fields: set[str] = set()
    for cond in conditions:
        if isinstance(cond, AnyOf):
            fields |= condition_fields(cond.conditions)
        else:
            fields.add(cond.field)
    return fields
