from __future__ import annotations

import pytest

from app import create_app
from generation import Success
from rate_limit import SlidingWindowRateLimiter
from settings import Settings


class FakeGateway:
    """Stands in for the upstream provider and records every call."""

    def __init__(self, result=None) -> None:
        self.result = result if result is not None else Success("Generated text")
        self.calls: list[tuple] = []

    def generate(self, api_key, prompt, params):
        self.calls.append((api_key, prompt, params))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def make_settings(**overrides) -> Settings:
    values = {
        "ai_provider": "gemini_api",
        "api_key": "test-key",
        "model": "gemini-2.5-flash",
        "upstream_timeout": 5.0,
        "rate_limit_per_minute": 0,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def app(settings, gateway):
    flask_app = create_app(
        settings=settings,
        gateway=gateway,
        rate_limiter=SlidingWindowRateLimiter(settings.rate_limit_per_minute),
    )
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
