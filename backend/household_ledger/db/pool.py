from contextlib import contextmanager

from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from household_ledger.core.config import Settings, settings
from household_ledger.db.store import PgTransactionStore

_pool: ConnectionPool | None = None


def build_pool(cfg: Settings) -> ConnectionPool:
    return ConnectionPool(
        cfg.database_url,
        min_size=cfg.db_pool_min,
        max_size=cfg.db_pool_max,
        timeout=cfg.db_pool_timeout,
        max_waiting=cfg.db_pool_max_waiting,
        open=False,
        kwargs={"row_factory": dict_row},
    )


def open_db_pool(cfg: Settings = settings) -> ConnectionPool:
    global _pool
    if _pool is None:
        _pool = build_pool(cfg)
        _pool.open()
    return _pool


def close_db_pool() -> None:
    global _pool
    if _pool is not None:
        _pool.close()
        _pool = None


@contextmanager
def transaction_store():
    """Read-only transaction store on a pooled connection; the pool must be open."""
    if _pool is None:
        raise RuntimeError("database pool is not open")
    with _pool.connection() as conn, conn.cursor() as cur:
        yield PgTransactionStore(cur)
