from typing import List, Optional

import pytest

from quote_api.core.config import Settings
from quote_api.models.captcha import CaptchaResult
from quote_api.models.email import Delivered, DeliveryResult, OutboundEmail

API_KEY = "re_test_secret_key_123"
CAPTCHA_SECRET = "captcha-secret-456"


class FakeMailer:
    def __init__(self, result: Optional[DeliveryResult] = None, error: Optional[Exception] = None):
        self.result = result or Delivered(message_id="email_1")
        self.error = error
        self.sent: List[OutboundEmail] = []

    async def send(self, email: OutboundEmail) -> DeliveryResult:
        self.sent.append(email)
        if self.error is not None:
            raise self.error
        return self.result


class FakeCaptchaVerifier:
    def __init__(self, result: Optional[CaptchaResult] = None, error: Optional[Exception] = None):
        self.result = result or CaptchaResult(success=True, score=0.9)
        self.error = error
        self.calls = []

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> CaptchaResult:
        self.calls.append((token, remote_ip))
        if self.error is not None:
            raise self.error
        return self.result


def make_settings(**overrides) -> Settings:
    values = {
        "ENVIRONMENT": "development",
        "RESEND_API_KEY": API_KEY,
        "MAIL_FROM": "quotes@send.motshete.com",
        "MAIL_TO": "sales@motshete.com",
        "RECAPTCHA_SECRET": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def valid_payload() -> dict:
    return {
        "name": "Jane Doe",
        "company": "Acme CC",
        "email": "jane@acme.co.za",
        "phone": "0821234567",
        "service": "Plumbing",
        "message": "Need a quote",
    }
