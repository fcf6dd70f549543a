from typing import Any, Optional

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from quote_api.core.config import Settings
from quote_api.core.logger import get_logger
from quote_api.models.response import MessageResponse, OkResponse, ValidationErrorResponse
from quote_api.services.quote_service import submit_quote

quote_router = APIRouter(tags=["Quote"])
logger = get_logger(__name__)

ALLOWED_METHODS = "POST, OPTIONS"
REJECTED_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE"]

ERROR_RESPONSES = {
    422: {"model": ValidationErrorResponse},
    403: {"model": MessageResponse},
    500: {"model": MessageResponse},
    502: {"model": MessageResponse},
}


async def read_json_body(request: Request) -> Any:
    """Parsed JSON body, or {} when the body is empty or not JSON."""
    try:
        return await request.json()
    except ValueError:
        logger.warning(f"Unparseable body on {request.method} {request.url.path}, treating as empty")
        return {}


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


@quote_router.post("/", response_model=OkResponse, responses=ERROR_RESPONSES)
@quote_router.post("/quote", response_model=OkResponse, responses=ERROR_RESPONSES)
async def create_quote_request(request: Request):
    """
    Validate a quote request form submission and email it to the sales inbox.
    """
    settings: Settings = request.app.state.settings
    payload = await read_json_body(request)

    await submit_quote(
        payload,
        settings,
        request.app.state.mailer,
        request.app.state.captcha_verifier,
        remote_ip=client_ip(request),
    )
    return OkResponse()


@quote_router.options("/", status_code=204)
@quote_router.options("/quote", status_code=204)
async def preflight():
    return Response(status_code=204)


@quote_router.api_route("/", methods=REJECTED_METHODS, include_in_schema=False)
@quote_router.api_route("/quote", methods=REJECTED_METHODS, include_in_schema=False)
async def method_not_allowed():
    return JSONResponse(
        status_code=405,
        content={"message": "Method Not Allowed"},
        headers={"Allow": ALLOWED_METHODS},
    )
