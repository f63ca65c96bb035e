import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from household_ledger.core.config import settings
from household_ledger.core.errors import DataAccessError, InvalidCursorError, PaginationError
from household_ledger.db.pool import transaction_store
from household_ledger.db.store import TransactionStore, validate_filter_fields
from household_ledger.models.transactions import (
    LegacyListRequest,
    LegacyPageResponse,
    TransactionListRequest,
    TransactionPageResponse,
)
from household_ledger.pagination.filters import Condition, OwnerScope, parse_filters
from household_ledger.pagination.legacy import from_legacy_params, to_legacy_format
from household_ledger.pagination.pager import CursorRequest, PageParams, PageResult, paginate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/transactions")


def _session_int(req: Request, key: str) -> int | None:
    value = (req.session or {}).get(key)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Not authenticated")


def require_owner_scope(req: Request) -> OwnerScope:
    user_id = _session_int(req, "user_id")
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return OwnerScope(owner_user_id=user_id, group_id=_session_int(req, "group_id"))


def get_transaction_store():
    with transaction_store() as store:
        yield store


def build_filters(mapping: dict[str, Any]) -> list[Condition]:
    try:
        filters = parse_filters(mapping)
        validate_filter_fields(filters)
    except PaginationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return filters


def run_page(store: TransactionStore, params: PageParams) -> PageResult:
    try:
        return paginate(store, params)
    except InvalidCursorError as exc:
        logger.info("Rejected list request with invalid cursor", extra={"cursor": exc.cursor})
        raise HTTPException(status_code=400, detail=str(exc))
    except PaginationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except DataAccessError:
        raise HTTPException(status_code=503, detail="Transaction store unavailable")


@router.post("/list", response_model=TransactionPageResponse)
def list_transactions(
    payload: TransactionListRequest,
    scope: OwnerScope = Depends(require_owner_scope),
    store: TransactionStore = Depends(get_transaction_store),
):
    limit = min(payload.limit or settings.page_default_limit, settings.page_max_limit)
    request = CursorRequest(cursor=payload.cursor, limit=limit, direction=payload.direction)
    params = PageParams.from_request(
        scope,
        request,
        filters=build_filters(payload.filter_mapping()),
        enable_count=payload.enable_count,
        max_count_limit=payload.max_count_limit or settings.count_warn_limit,
    )
    result = run_page(store, params)
    return TransactionPageResponse(**result.to_dict())


@router.post("/legacy", response_model=LegacyPageResponse)
def list_transactions_legacy(
    payload: LegacyListRequest,
    scope: OwnerScope = Depends(require_owner_scope),
    store: TransactionStore = Depends(get_transaction_store),
):
    request = from_legacy_params(payload.page, payload.limit)
    # Legacy clients render page counts, so the total is always requested.
    params = PageParams.from_request(
        scope,
        request,
        filters=build_filters(payload.filter_mapping()),
        enable_count=True,
        max_count_limit=settings.count_warn_limit,
    )
    result = run_page(store, params)
    return LegacyPageResponse(**to_legacy_format(result, payload.page).to_dict())
