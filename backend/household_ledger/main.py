from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from household_ledger.core.config import settings
from household_ledger.core.logging import configure_logging
from household_ledger.db.pool import close_db_pool, open_db_pool
from household_ledger.routers.transactions import router as transactions_router

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(_: FastAPI):
    open_db_pool()
    try:
        yield
    finally:
        close_db_pool()


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie="ledger_session",
    same_site="strict",
    https_only=settings.cookie_secure,
)


app.include_router(transactions_router)


@app.exception_handler(HTTPException)
def http_exc_handler(_, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"ok": False, "detail": exc.detail})


@app.exception_handler(RequestValidationError)
def validation_exc_handler(_, exc: RequestValidationError):
    return JSONResponse(status_code=422, content={"ok": False, "detail": jsonable_encoder(exc.errors())})
