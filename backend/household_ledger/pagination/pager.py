"""Keyset pagination over rows ordered by their unique ``id``.

Pages are always returned newest-first (``id`` descending). A forward scan
continues toward smaller ids, a backward scan returns toward larger ids. Each
call asks the store for ``limit + 1`` rows; the extra row only tells us
whether the scan can continue, so seek cost never depends on how deep the
cursor points.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Literal, Sequence

from household_ledger.core.errors import InvalidPageRequestError
from household_ledger.db.store import TransactionStore
from household_ledger.pagination.cursor import CursorCodec, IdCursorCodec
from household_ledger.pagination.filters import Condition, OwnerScope, Range, combine, require_scope

logger = logging.getLogger(__name__)

Direction = Literal["forward", "backward"]
DIRECTIONS = ("forward", "backward")
DEFAULT_MAX_COUNT_LIMIT = 10000


@dataclass(frozen=True)
class CursorRequest:
    cursor: str | None
    limit: int
    direction: Direction = "forward"


@dataclass(frozen=True)
class PageParams:
    owner_scope: OwnerScope
    limit: int
    cursor: str | None = None
    direction: Direction = "forward"
    filters: Sequence[Condition] = ()
    enable_count: bool = False
    max_count_limit: int = DEFAULT_MAX_COUNT_LIMIT

    @classmethod
    def from_request(
        cls,
        owner_scope: OwnerScope,
        request: CursorRequest,
        filters: Sequence[Condition] = (),
        enable_count: bool = False,
        max_count_limit: int = DEFAULT_MAX_COUNT_LIMIT,
    ) -> "PageParams":
        return cls(
            owner_scope=owner_scope,
            limit=request.limit,
            cursor=request.cursor,
            direction=request.direction,
            filters=tuple(filters),
            enable_count=enable_count,
            max_count_limit=max_count_limit,
        )


@dataclass
class PageInfo:
    next_cursor: str | None
    prev_cursor: str | None
    has_more: bool
    total_count: int | None = None


@dataclass
class PageTiming:
    query_time: float
    total_count_query_time: float | None = None


@dataclass
class PageResult:
    data: list[dict[str, Any]]
    pagination: PageInfo
    performance: PageTiming = field(default_factory=lambda: PageTiming(query_time=0.0))

    def to_dict(self) -> dict[str, Any]:
        pagination: dict[str, Any] = {
            "next_cursor": self.pagination.next_cursor,
            "prev_cursor": self.pagination.prev_cursor,
            "has_more": self.pagination.has_more,
        }
        if self.pagination.total_count is not None:
            pagination["total_count"] = self.pagination.total_count
        performance: dict[str, Any] = {"query_time": self.performance.query_time}
        if self.performance.total_count_query_time is not None:
            performance["total_count_query_time"] = self.performance.total_count_query_time
        return {"data": self.data, "pagination": pagination, "performance": performance}


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


def validate_params(params: PageParams) -> None:
    require_scope(params.owner_scope)
    if isinstance(params.limit, bool) or not isinstance(params.limit, int) or params.limit < 1:
        raise InvalidPageRequestError(f"limit must be a positive integer, got {params.limit!r}")
    if params.direction not in DIRECTIONS:
        raise InvalidPageRequestError(f"direction must be 'forward' or 'backward', got {params.direction!r}")
    if params.max_count_limit < 1:
        raise InvalidPageRequestError("max_count_limit must be positive")


class KeysetPager:
    def __init__(self, store: TransactionStore, codec: CursorCodec | None = None) -> None:
        self.store = store
        self.codec = codec or IdCursorCodec()

    def page(self, params: PageParams) -> PageResult:
        validate_params(params)
        cursor_id = self.codec.decode(params.cursor) if params.cursor is not None else None
        forward = params.direction == "forward"

        cursor_cond = None
        if cursor_id is not None:
            cursor_cond = Range("id", lt=cursor_id) if forward else Range("id", gt=cursor_id)

        log_ctx = {
            "operation": "page",
            **params.owner_scope.log_context(),
            "cursor": params.cursor,
            "limit": params.limit,
            "direction": params.direction,
        }

        try:
            started = time.perf_counter()
            fetched = self.store.find_many(
                combine(params.owner_scope, params.filters, cursor_cond),
                order="desc" if forward else "asc",
                take=params.limit + 1,
            )
            query_time = _elapsed_ms(started)
            has_more = len(fetched) > params.limit
            rows = list(fetched)
            if not forward:
                rows.reverse()
            # Trim in canonical order; a backward overfetch drops the row next to the cursor.
            rows = rows[: params.limit]

            next_cursor = None
            prev_cursor = None
            if rows:
                # Backward scans start from a cursor row, which lies past the page.
                older_exists = has_more if forward else cursor_id is not None
                if older_exists:
                    next_cursor = self.codec.encode(rows[-1]["id"])
                first_id = rows[0]["id"]
                newer = self.store.find_first(
                    combine(params.owner_scope, params.filters, Range("id", gt=first_id))
                )
                if newer is not None:
                    prev_cursor = self.codec.encode(first_id)
        except Exception:
            logger.error("Cursor pagination query failed", exc_info=True, extra=log_ctx)
            raise

        result = PageResult(
            data=rows,
            pagination=PageInfo(next_cursor=next_cursor, prev_cursor=prev_cursor, has_more=has_more),
            performance=PageTiming(query_time=query_time),
        )
        if params.enable_count:
            self._attach_count(params, result, log_ctx)

        logger.debug(
            "Cursor pagination page served",
            extra={**log_ctx, "rows": len(rows), "has_more": has_more, "query_time": query_time},
        )
        return result

    def _attach_count(self, params: PageParams, result: PageResult, log_ctx: dict[str, Any]) -> None:
        started = time.perf_counter()
        try:
            total = int(self.store.count(combine(params.owner_scope, params.filters)))
        except Exception:
            logger.error("Cursor pagination count failed", exc_info=True, extra={**log_ctx, "operation": "count"})
            raise
        result.performance.total_count_query_time = _elapsed_ms(started)
        result.pagination.total_count = total
        if total > params.max_count_limit:
            logger.warning(
                f"Total count ({total}) exceeds maxCountLimit ({params.max_count_limit})",
                extra={**log_ctx, "total_count": total, "max_count_limit": params.max_count_limit},
            )


def paginate(store: TransactionStore, params: PageParams, codec: CursorCodec | None = None) -> PageResult:
    return KeysetPager(store, codec).page(params)
