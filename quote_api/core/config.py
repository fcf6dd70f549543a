from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings

from quote_api.models.quote_request import PhonePolicy

REQUIRED_MAIL_SETTINGS = ("RESEND_API_KEY", "MAIL_FROM", "MAIL_TO")


class Settings(BaseSettings):
    APP_NAME: str = "Quote Request API"
    ENVIRONMENT: str = "production"

    # Mail delivery (Resend). Optional here so the process can boot and report
    # misconfiguration per request.
    RESEND_API_KEY: Optional[str] = None
    RESEND_BASE_URL: str = "https://api.resend.com"
    MAIL_FROM: Optional[str] = None
    MAIL_FROM_NAME: str = "Quotes"
    MAIL_TO: Optional[str] = None

    # CAPTCHA is disabled while the secret is unset
    RECAPTCHA_SECRET: Optional[str] = None
    RECAPTCHA_VERIFY_URL: str = "https://www.google.com/recaptcha/api/siteverify"
    CAPTCHA_MIN_SCORE: float = 0.4

    PHONE_POLICY: PhonePolicy = PhonePolicy.GENERIC

    ALLOWED_ORIGINS: List[str] = [
        "https://www.motshete.com",
        "https://motshete.com",
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    DEFAULT_ORIGIN: str = "https://www.motshete.com"

    HTTP_TIMEOUT_SECONDS: float = 10.0

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    class Config:
        env_file = ".env"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "production"

    @property
    def captcha_enabled(self) -> bool:
        return bool(self.RECAPTCHA_SECRET)

    @property
    def mail_sender(self) -> str:
        return f"{self.MAIL_FROM_NAME} <{self.MAIL_FROM}>"

    def missing_mail_settings(self) -> List[str]:
        """Names of the required mail settings that are unset or blank."""
        return [name for name in REQUIRED_MAIL_SETTINGS if not (getattr(self, name) or "").strip()]

    def secret_values(self) -> List[str]:
        return [value for value in (self.RESEND_API_KEY, self.RECAPTCHA_SECRET) if value]


@lru_cache
def get_settings() -> Settings:
    return Settings()
