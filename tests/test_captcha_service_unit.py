import asyncio

from quote_api.models.captcha import CaptchaResult
from quote_api.services.captcha_service import RecaptchaVerifier


class FakeResponse:
    def __init__(self, data: dict):
        self.data = data

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    def raise_for_status(self) -> None:
        return None

    async def json(self) -> dict:
        return self.data


class FakeSession:
    def __init__(self, data: dict, calls: list, **kwargs):
        self.data = data
        self.calls = calls
        self.kwargs = kwargs

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    def post(self, url: str, data=None):
        self.calls.append((url, data, self.kwargs))
        return FakeResponse(self.data)


def _verifier(data: dict, calls: list) -> RecaptchaVerifier:
    return RecaptchaVerifier(
        "secret",
        timeout=5,
        verify_url="https://captcha.test/siteverify",
        session_factory=lambda **kwargs: FakeSession(data, calls, **kwargs),
    )


def test_verify_posts_secret_and_token() -> None:
    calls = []
    verifier = _verifier({"success": True, "score": 0.7, "action": "quote"}, calls)

    result = asyncio.run(verifier.verify("tok-1", remote_ip="10.0.0.1"))

    assert result.success is True
    assert result.score == 0.7
    url, form, kwargs = calls[0]
    assert url == "https://captcha.test/siteverify"
    assert form == {"secret": "secret", "response": "tok-1", "remoteip": "10.0.0.1"}
    assert kwargs["timeout"].total == 5


def test_verify_reads_error_codes() -> None:
    calls = []
    verifier = _verifier({"success": False, "error-codes": ["invalid-input-response"]}, calls)

    result = asyncio.run(verifier.verify("bad"))

    assert result.success is False
    assert result.error_codes == ["invalid-input-response"]
    assert "remoteip" not in calls[0][1]


def test_passed_applies_score_threshold() -> None:
    assert CaptchaResult(success=True, score=0.5).passed(0.4)
    assert CaptchaResult(success=True, score=0.4).passed(0.4)
    assert not CaptchaResult(success=True, score=0.3).passed(0.4)
    assert not CaptchaResult(success=False, score=0.9).passed(0.4)
    assert CaptchaResult(success=True).passed(0.4)
