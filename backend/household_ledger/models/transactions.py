from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class RangeFilter(BaseModel):
    model_config = ConfigDict(extra="forbid")

    gte: int | float | datetime | None = None
    lte: int | float | datetime | None = None
    gt: int | float | datetime | None = None
    lt: int | float | datetime | None = None


FilterValue = RangeFilter | int | str | datetime


class FilteredRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    filters: dict[str, FilterValue] = Field(default_factory=dict)

    def filter_mapping(self) -> dict[str, Any]:
        return {
            name: value.model_dump(exclude_none=True) if isinstance(value, RangeFilter) else value
            for name, value in self.filters.items()
        }


class TransactionListRequest(FilteredRequest):
    limit: int | None = Field(default=None, ge=1, le=100)
    cursor: str | None = None
    direction: Literal["forward", "backward"] = "forward"
    enable_count: bool = False
    max_count_limit: int | None = Field(default=None, ge=1)


class LegacyListRequest(FilteredRequest):
    page: int | None = None
    limit: int | None = Field(default=None, le=100)


class TransactionItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    owner_user_id: int | None = None
    group_id: int | None = None
    account_id: int | None = None
    category_id: int | None = None
    category_name: str | None = None
    category_color: str | None = None
    tag_id: int | None = None
    type: str | None = None
    amount: int | None = None
    memo: str | None = None
    date: datetime | None = None
    created_at: datetime | None = None


class CursorPaging(BaseModel):
    next_cursor: str | None = None
    prev_cursor: str | None = None
    has_more: bool
    total_count: int | None = None


class LegacyPaging(BaseModel):
    page: int
    limit: int
    total: int | None = None
    total_pages: int | None = None
    has_next: bool
    has_prev: bool


class PerformanceInfo(BaseModel):
    query_time: float
    total_count_query_time: float | None = None


class TransactionPageResponse(BaseModel):
    ok: bool = True
    data: list[TransactionItem]
    pagination: CursorPaging
    performance: PerformanceInfo


class LegacyPageResponse(BaseModel):
    ok: bool = True
    data: list[TransactionItem]
    pagination: LegacyPaging
    performance: PerformanceInfo
