import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.cache.base import get_cache
from app.core.config import get_settings
from app.core.exceptions import (
    AppError,
    app_exception_handler,
    generic_exception_handler,
    validation_exception_handler,
)
from app.core.logging import bind_request_id, configure_logging, get_logger
from app.db.init import init_db
from app.routers import (
    accounts,
    auth,
    crypto,
    dashboard,
    debts,
    demo_requests,
    guest,
    monthly_expenses,
    rates,
    transactions,
)
from app.store.base import get_store

settings = get_settings()
configure_logging(debug=settings.debug)
log = get_logger(__name__)

# (router, prefix, tag); every route is versioned under /v1
ROUTES = [
    (auth.router, "/auth", "auth"),
    (accounts.router, "/accounts", "accounts"),
    (debts.router, "/debts", "debts"),
    (transactions.router, "/transactions", "transactions"),
    (monthly_expenses.router, "/monthly-expenses", "monthly-expenses"),
    (crypto.router, "/crypto", "crypto"),
    (dashboard.router, "/dashboard", "dashboard"),
    (rates.router, "/rates", "rates"),
    (guest.router, "/guest", "guest"),
    (demo_requests.router, "/demo-requests", "demo"),
]

app = FastAPI(
    title="Global Pocket API",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id
    bind_request_id(request_id)
    start = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    log.info(
        "request",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return response


app.add_exception_handler(AppError, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

for router, prefix, tag in ROUTES:
    app.include_router(router, prefix=f"/v1{prefix}", tags=[tag])


@app.on_event("startup")
async def startup():
    if settings.sentry_dsn:
        import sentry_sdk
        sentry_sdk.init(dsn=settings.sentry_dsn, environment=settings.env, traces_sample_rate=0.1)
        log.info("sentry_enabled")
    await init_db()
    log.info("startup", store=settings.store_backend, cache=settings.cache_backend, identity=settings.identity_backend)


@app.on_event("shutdown")
async def shutdown():
    await get_store().close()
    await get_cache().close()
    log.info("shutdown")


@app.get("/health")
async def health():
    """Liveness probe; reports which backends this process is wired to."""
    return {
        "status": "ok",
        "store": settings.store_backend,
        "cache": settings.cache_backend,
    }
