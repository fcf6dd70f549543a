from typing import Optional, Protocol

import aiohttp

from quote_api.core.logger import get_logger
from quote_api.models.captcha import CaptchaResult

logger = get_logger(__name__)

RECAPTCHA_VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


class CaptchaVerifier(Protocol):
    async def verify(self, token: str, remote_ip: Optional[str] = None) -> CaptchaResult:
        ...


class RecaptchaVerifier:
    """Scores CAPTCHA tokens with Google reCAPTCHA siteverify."""

    def __init__(
        self,
        secret: str,
        timeout: float = 10.0,
        verify_url: str = RECAPTCHA_VERIFY_URL,
        session_factory=aiohttp.ClientSession,
    ):
        self.secret = secret
        self.timeout = timeout
        self.verify_url = verify_url
        self.session_factory = session_factory

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> CaptchaResult:
        form = {"secret": self.secret, "response": token}
        if remote_ip:
            form["remoteip"] = remote_ip

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with self.session_factory(timeout=timeout) as session:
            async with session.post(self.verify_url, data=form) as response:
                response.raise_for_status()
                data = await response.json()

        result = CaptchaResult.model_validate(data)
        logger.info(
            f"CAPTCHA verification success={result.success} score={result.score} "
            f"errors={result.error_codes}"
        )
        return result
