
import time
from fastapi import Request
from fastapi.responses import Response
from quote_api.core.logger import get_logger

logger = get_logger("request_logger")

CORS_ALLOW_METHODS = "POST, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type"


async def log_requests(request: Request, call_next):
    start_time = time.time()
    logger.info(f"Started request {request.method} {request.url.path}")
    response = await call_next(request)
    duration = time.time() - start_time
    logger.info(
        f"Completed request {request.method} {request.url.path} "
        f"with status={response.status_code} in {duration:.3f}s"
    )
    return response


def resolve_allowed_origin(origin: str | None, allowed_origins: list[str], default_origin: str) -> str:
    """Echo a known origin back, otherwise answer with the canonical one."""
    if origin and origin in allowed_origins:
        return origin
    return default_origin


async def apply_cors_headers(request: Request, call_next) -> Response:
    settings = request.app.state.settings
    response = await call_next(request)
    response.headers["Access-Control-Allow-Origin"] = resolve_allowed_origin(
        request.headers.get("origin"), settings.ALLOWED_ORIGINS, settings.DEFAULT_ORIGIN
    )
    response.headers["Vary"] = "Origin"
    response.headers["Access-Control-Allow-Methods"] = CORS_ALLOW_METHODS
    response.headers["Access-Control-Allow-Headers"] = CORS_ALLOW_HEADERS
    return response
