from typing import Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

REDACTED = "***"


class QuoteAPIError(Exception):
    """Base class for failures that map onto a client response."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def body(self, include_details: bool, secrets: List[str]) -> dict:
        body = {"message": self.message}
        if include_details and self.details:
            body["details"] = redact(self.details, secrets)
        return body


class QuoteValidationError(QuoteAPIError):
    status_code = 422
    message = "Invalid quote request"

    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__()
        self.errors = errors

    def body(self, include_details: bool, secrets: List[str]) -> dict:
        return {"errors": self.errors}


class ConfigurationError(QuoteAPIError):
    status_code = 500
    message = "Server misconfigured"

    def __init__(self, missing: List[str]):
        # Missing names stay server side; the client only gets the generic message
        super().__init__()
        self.missing = missing


class CaptchaRejected(QuoteAPIError):
    status_code = 403
    message = "Failed CAPTCHA verification"


class DeliveryProviderError(QuoteAPIError):
    status_code = 502
    message = "Email provider error"


class UnhandledDeliveryError(QuoteAPIError):
    status_code = 500
    message = "Could not send quote request email"


def redact(text: str, secrets: List[str]) -> str:
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(QuoteAPIError)
    async def quote_api_error_handler(request: Request, exc: QuoteAPIError):
        settings = request.app.state.settings
        body = exc.body(not settings.is_production, settings.secret_values())
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )
