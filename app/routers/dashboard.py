from fastapi import APIRouter, Depends

from app.cache.base import EphemeralCache
from app.deps import CurrentOwner, cache_dep, get_current_owner, store_dep
from app.services.dashboard import build_dashboard
from app.store.base import DocumentStore

router = APIRouter()


@router.get("")
async def dashboard(
    owner: CurrentOwner = Depends(get_current_owner),
    store: DocumentStore = Depends(store_dep),
    cache: EphemeralCache = Depends(cache_dep),
):
    """Total balance, total debt, net balance and expense totals, recomputed on every call."""
    summary = await build_dashboard(store, owner.owner_id, cache)
    return summary.model_dump(mode="json")
