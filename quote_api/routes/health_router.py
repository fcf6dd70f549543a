from fastapi import APIRouter

from quote_api.models.response import HealthResponse

health_router = APIRouter(tags=["Health"])


@health_router.get("/healthz", response_model=HealthResponse)
async def healthz():
    return HealthResponse()
