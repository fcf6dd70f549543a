from typing import Optional, Protocol

import httpx

from quote_api.core.logger import get_logger
from quote_api.models.email import Delivered, DeliveryError, DeliveryResult, OutboundEmail

logger = get_logger(__name__)

RESEND_BASE_URL = "https://api.resend.com"


class Mailer(Protocol):
    async def send(self, email: OutboundEmail) -> DeliveryResult:
        ...


def build_resend_payload(email: OutboundEmail) -> dict:
    payload = {
        "from": email.sender,
        "to": list(email.to),
        "reply_to": email.reply_to,
        "subject": email.subject,
        "html": email.html,
    }
    if email.text:
        payload["text"] = email.text
    return payload


def parse_resend_error(response: httpx.Response) -> DeliveryError:
    """Turn a non-2xx Resend response into a structured delivery error."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    return DeliveryError(
        message=body.get("message") or response.text or f"HTTP {response.status_code}",
        name=body.get("name"),
        status_code=body.get("statusCode") or response.status_code,
    )


class ResendMailer:
    """Sends mail through the Resend REST API."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        base_url: str = RESEND_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    async def send(self, email: OutboundEmail) -> DeliveryResult:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        url = f"{self.base_url}/emails"
        logger.info(f"Resend POST {url} subject={email.subject!r}")

        # Transport errors (timeouts, refused connections) propagate to the caller
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            resp = await client.post(url, headers=headers, json=build_resend_payload(email))

        if resp.status_code >= 400:
            error = parse_resend_error(resp)
            logger.error(f"Resend error {error.status_code} {error.name}: {error.message}")
            return error

        try:
            message_id = resp.json().get("id")
        except ValueError:
            message_id = None
        logger.info(f"Resend accepted email id={message_id}")
        return Delivered(message_id=message_id)
