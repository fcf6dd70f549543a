from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from quote_api.core.config import Settings, get_settings
from quote_api.core.errors import register_exception_handlers
from quote_api.core.logger import get_logger
from quote_api.core.middleware import apply_cors_headers, log_requests
from quote_api.routes.health_router import health_router
from quote_api.routes.quote_router import quote_router
from quote_api.services.captcha_service import CaptchaVerifier, RecaptchaVerifier
from quote_api.services.email_service import Mailer, ResendMailer

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    logger.info(f" {settings.APP_NAME} startup complete (environment={settings.ENVIRONMENT})")
    missing = settings.missing_mail_settings()
    if missing:
        logger.warning(f" Mail delivery not configured, quote requests will fail. Missing: {', '.join(missing)}")

    yield

    logger.info(" Application shutdown initiated")


def create_app(
    settings: Optional[Settings] = None,
    mailer: Optional[Mailer] = None,
    captcha_verifier: Optional[CaptchaVerifier] = None,
) -> FastAPI:
    """
    Build the application around one settings object and its collaborators.

    Collaborators default to the Resend and reCAPTCHA clients built from the
    settings; tests pass fakes instead.
    """
    settings = settings or get_settings()

    if mailer is None and settings.RESEND_API_KEY:
        mailer = ResendMailer(
            settings.RESEND_API_KEY,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            base_url=settings.RESEND_BASE_URL,
        )
    if captcha_verifier is None and settings.captcha_enabled:
        captcha_verifier = RecaptchaVerifier(
            settings.RECAPTCHA_SECRET,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            verify_url=settings.RECAPTCHA_VERIFY_URL,
        )

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.mailer = mailer
    app.state.captcha_verifier = captcha_verifier

    register_exception_handlers(app)
    # Registered last so it wraps everything, including error responses
    app.middleware("http")(log_requests)
    app.middleware("http")(apply_cors_headers)
    app.include_router(health_router)
    app.include_router(quote_router)
    return app


app = create_app()
