"""
Pytest configuration and fixtures
"""
import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from contact_form.config import Settings

WEBHOOK_URL = "https://hooks.example.org/contact"
CAPTCHA_VERIFY_URL = "https://captcha.example.org/siteverify"


def valid_submission() -> Dict[str, str]:
    """A submission that satisfies the bundled contact form"""
    return {
        "name": "Jane Doe",
        "email": "jane.doe@acme.io",
        "telephone": "+56912345678",
        "company": "Acme Industries",
        "subject": "Interested in a yearly support contract",
        "message": (
            "Hello, we are evaluating providers for our internal platform and would "
            "like to know more about your plans, pricing and onboarding process. "
            "Please contact us at your earliest convenience."
        ),
    }


@pytest.fixture
def submission() -> Dict[str, str]:
    return valid_submission()


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Settings isolated from the environment and any .env file"""

    def _make(**overrides: Any) -> Settings:
        values = {
            "webhook_url": WEBHOOK_URL,
            "webhook_secret_key": None,
            "captcha_site_key": None,
            "captcha_secret_key": None,
            "captcha_verify_url": CAPTCHA_VERIFY_URL,
            "contact_source": "acme.io",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


class RecordingTransport:
    """Mock transport answering webhook and captcha calls while recording requests"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.webhook_response = httpx.Response(200, json={"ok": True})
        self.captcha_response = httpx.Response(200, json={"success": True})
        self.webhook_error = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url) == CAPTCHA_VERIFY_URL:
            return self.captcha_response
        if self.webhook_error is not None:
            raise self.webhook_error
        return self.webhook_response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def webhook_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url) == WEBHOOK_URL]

    def captcha_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if str(r.url) == CAPTCHA_VERIFY_URL]

    def last_payload(self) -> Dict[str, Any]:
        return json.loads(self.webhook_requests()[-1].content)


@pytest.fixture
def recorder() -> RecordingTransport:
    return RecordingTransport()
