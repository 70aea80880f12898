import httpx
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.cache.base import EphemeralCache
from app.deps import cache_dep, get_client_id, http_client_dep
from app.services import demo_requests as demo_service

router = APIRouter()


class DemoRequest(BaseModel):
    email: str


@router.get("")
async def demo_request_status(
    cache: EphemeralCache = Depends(cache_dep),
    client_id: str = Depends(get_client_id),
):
    return {"requested": await demo_service.has_requested(cache, client_id)}


@router.post("")
async def demo_request_submit(
    body: DemoRequest,
    cache: EphemeralCache = Depends(cache_dep),
    client: httpx.AsyncClient = Depends(http_client_dep),
    client_id: str = Depends(get_client_id),
):
    """Public form: notify the team once per browser."""
    await demo_service.submit_demo_request(cache, client, client_id, body.email)
    return {"message": "Demo request sent successfully"}
