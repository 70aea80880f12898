import certifi
from motor.motor_asyncio import AsyncIOMotorClient

from app.core.config import get_settings
from app.core.logging import get_logger
from app.models.account import Account
from app.models.audit_log import AuditLog
from app.models.crypto_holding import CryptoHolding
from app.models.debt import Debt
from app.models.failed_job import FailedJob
from app.models.monthly_expense import MonthlyExpense
from app.models.profile import Profile
from app.models.transaction import Transaction
from app.store.base import get_store

log = get_logger(__name__)

DOCUMENT_MODELS = [
    Profile,
    Account,
    Debt,
    Transaction,
    MonthlyExpense,
    CryptoHolding,
    AuditLog,
    FailedJob,
]


def _use_tls(uri: str) -> bool:
    """True if URI uses TLS (Atlas or explicit tls=true). Avoids TLS for plain mongodb:// in CI."""
    return "mongodb+srv://" in uri or "tls=true" in uri.lower()


def create_mongo_client(uri: str) -> AsyncIOMotorClient:
    # Atlas in Docker: tlsCAFile + tlsDisableOCSPEndpointCheck avoid TLSV1_ALERT_INTERNAL_ERROR
    kwargs = {"tz_aware": True}
    if _use_tls(uri):
        kwargs["tlsCAFile"] = certifi.where()
        kwargs["tlsDisableOCSPEndpointCheck"] = True
    return AsyncIOMotorClient(uri, **kwargs)


async def init_db() -> None:
    """Create per-collection indexes when running against MongoDB."""
    settings = get_settings()
    store = get_store()
    if settings.store_backend != "mongo":
        log.info("store_ready", backend=settings.store_backend)
        return
    from app.store.mongo import MongoStore
    assert isinstance(store, MongoStore)
    for model in DOCUMENT_MODELS:
        await store.ensure_indexes(model.collection, model.indexes)
    log.info("store_ready", backend="mongo", db=settings.mongodb_db_name)
