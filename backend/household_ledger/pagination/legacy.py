"""Page-number compatibility for clients that predate cursor pagination.

Old clients send ``page`` and ``limit``. Jumping to page N would need N-1
cursor round trips, so every legacy request is served as the first page of a
forward scan and a deprecation warning is logged.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any

from household_ledger.pagination.pager import CursorRequest, PageResult

logger = logging.getLogger(__name__)

DEFAULT_LEGACY_LIMIT = 20


@dataclass
class LegacyPage:
    data: list[dict[str, Any]]
    pagination: dict[str, Any]
    performance: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "pagination": self.pagination, "performance": self.performance}


def normalize_page(page: Any) -> int:
    try:
        value = int(page)
    except (TypeError, ValueError):
        return 1
    return value if value >= 1 else 1


def from_legacy_params(page: Any = None, limit: Any = None) -> CursorRequest:
    logger.warning(
        "Legacy pagination request detected",
        extra={
            "recommendation": "migrate to cursor based pagination (cursor + direction) for stable, constant-cost pages",
            "params": {"page": page, "limit": limit},
        },
    )
    try:
        size = int(limit) if limit is not None else DEFAULT_LEGACY_LIMIT
    except (TypeError, ValueError):
        size = DEFAULT_LEGACY_LIMIT
    if size < 1:
        size = DEFAULT_LEGACY_LIMIT
    return CursorRequest(cursor=None, limit=size, direction="forward")


def to_legacy_format(result: PageResult, page: Any = 1) -> LegacyPage:
    current = normalize_page(page)
    size = len(result.data)
    total = result.pagination.total_count
    total_pages = None
    if total is not None:
        total_pages = math.ceil(total / size) if size else 0
    performance: dict[str, Any] = {"query_time": result.performance.query_time}
    if result.performance.total_count_query_time is not None:
        performance["total_count_query_time"] = result.performance.total_count_query_time
    return LegacyPage(
        data=result.data,
        pagination={
            "page": current,
            "limit": size,
            "total": total,
            "total_pages": total_pages,
            "has_next": result.pagination.has_more,
            "has_prev": current > 1,
        },
        performance=performance,
    )
