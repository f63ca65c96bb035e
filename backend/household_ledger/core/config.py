import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    database_url: str
    session_secret: str
    cookie_secure: bool
    log_level: str
    db_pool_min: int
    db_pool_max: int
    db_pool_timeout: float
    db_pool_max_waiting: int
    page_default_limit: int
    page_max_limit: int
    count_warn_limit: int


def load_settings() -> Settings:
    database_url = os.getenv("DATABASE_URL", "")
    session_secret = os.getenv("SESSION_SECRET")
    if not database_url:
        raise RuntimeError("DATABASE_URL is required")
    if not session_secret:
        raise RuntimeError("SESSION_SECRET is required")

    db_pool_min = max(1, int(os.getenv("DB_POOL_MIN", "1")))
    db_pool_max = max(db_pool_min, int(os.getenv("DB_POOL_MAX", "10")))

    page_max_limit = max(1, int(os.getenv("PAGE_MAX_LIMIT", "100")))
    page_default_limit = max(1, min(page_max_limit, int(os.getenv("PAGE_DEFAULT_LIMIT", "20"))))

    return Settings(
        database_url=database_url,
        session_secret=session_secret,
        cookie_secure=os.getenv("COOKIE_SECURE", "false").lower() == "true",
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper() or "INFO",
        db_pool_min=db_pool_min,
        db_pool_max=db_pool_max,
        db_pool_timeout=float(os.getenv("DB_POOL_TIMEOUT", "30")),
        db_pool_max_waiting=int(os.getenv("DB_POOL_MAX_WAITING", "100")),
        page_default_limit=page_default_limit,
        page_max_limit=page_max_limit,
        count_warn_limit=max(1, int(os.getenv("COUNT_WARN_LIMIT", "10000"))),
    )


settings = load_settings()
