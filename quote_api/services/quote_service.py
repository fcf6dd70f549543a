from typing import Any, Optional

from quote_api.core.config import Settings
from quote_api.core.errors import (
    CaptchaRejected,
    ConfigurationError,
    DeliveryProviderError,
    QuoteValidationError,
    UnhandledDeliveryError,
)
from quote_api.core.logger import get_logger
from quote_api.models.email import DeliveryError, OutboundEmail
from quote_api.models.quote_request import QuoteRequest
from quote_api.services.captcha_service import CaptchaVerifier
from quote_api.services.email_service import Mailer
from quote_api.services.notification_service import render_quote_email
from quote_api.services.validation import Invalid, validate_quote

logger = get_logger(__name__)


def ensure_configured(settings: Settings) -> None:
    missing = settings.missing_mail_settings()
    if missing:
        logger.error(f"Server misconfigured, missing env: {', '.join(missing)}")
        raise ConfigurationError(missing)


async def check_captcha(
    quote: QuoteRequest,
    settings: Settings,
    verifier: Optional[CaptchaVerifier],
    remote_ip: Optional[str] = None,
) -> None:
    """Reject the submission when a supplied token scores below the threshold."""
    if not settings.captcha_enabled or verifier is None or not quote.captcha_token:
        return

    try:
        result = await verifier.verify(quote.captcha_token, remote_ip)
    except Exception as e:
        # An unverifiable token is treated like a failing one
        logger.exception(f"CAPTCHA verification failed: {e}")
        raise CaptchaRejected(details=str(e))

    if not result.passed(settings.CAPTCHA_MIN_SCORE):
        logger.warning(
            f"CAPTCHA rejected for {quote.company!r}: success={result.success} score={result.score}"
        )
        raise CaptchaRejected()


def build_outbound_email(quote: QuoteRequest, settings: Settings) -> OutboundEmail:
    rendered = render_quote_email(quote)
    return OutboundEmail(
        sender=settings.mail_sender,
        to=[settings.MAIL_TO],
        reply_to=quote.email,
        subject=rendered.subject,
        html=rendered.html,
        text=rendered.text,
    )


async def deliver(quote: QuoteRequest, settings: Settings, mailer: Mailer) -> None:
    email = build_outbound_email(quote, settings)
    try:
        result = await mailer.send(email)
    except Exception as e:
        logger.exception(f"Unhandled send error: {e}")
        raise UnhandledDeliveryError(details=str(e) or type(e).__name__)

    if isinstance(result, DeliveryError):
        # Common causes: unverified sending domain, bad from address, invalid recipient
        logger.error(f"Email provider error ({result.status_code} {result.name}): {result.message}")
        raise DeliveryProviderError(details=result.message)


async def submit_quote(
    payload: Any,
    settings: Settings,
    mailer: Mailer,
    captcha_verifier: Optional[CaptchaVerifier] = None,
    remote_ip: Optional[str] = None,
) -> QuoteRequest:
    """
    Run one quote submission end to end.

    Order matters: configuration, validation and CAPTCHA all short-circuit
    before the mailer is touched. Raises a QuoteAPIError subclass on failure.
    """
    ensure_configured(settings)

    outcome = validate_quote(payload, settings.PHONE_POLICY)
    if isinstance(outcome, Invalid):
        logger.info(f"Rejected quote request, invalid fields: {sorted(outcome.errors)}")
        raise QuoteValidationError(outcome.errors)

    quote = outcome.quote
    await check_captcha(quote, settings, captcha_verifier, remote_ip)

    logger.info(f"Sending quote request for {quote.service!r} from {quote.company!r}")
    await deliver(quote, settings, mailer)
    logger.info(f"Quote request for {quote.company!r} delivered")
    return quote
