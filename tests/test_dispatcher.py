from __future__ import annotations

import pytest

import app as app_module
from app import create_app
from conftest import FakeGateway, make_settings
from generation import ErrorKind, Failure
from rate_limit import SlidingWindowRateLimiter
from site_config import SITE_CONFIG
from tools import TOOLS


def test_health_reports_service_and_key_presence(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "healthy"
    assert body["service"] == SITE_CONFIG["service_name"]
    assert body["version"] == SITE_CONFIG["version"]
    assert body["hasApiKey"] is True
    assert body["timestamp"].endswith("Z")
    assert "test-key" not in response.get_data(as_text=True)


def test_tool_call_returns_generated_content(client, gateway) -> None:
    response = client.post("/ai/paraphrase", json={"text": "The cat sat on the mat."})

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["content"] == "Generated text"
    assert body["tool"] == "Paraphrasing Tool"
    assert body["timestamp"]

    api_key, prompt, params = gateway.calls[0]
    assert api_key == "test-key"
    assert prompt == TOOLS["/ai/paraphrase"].prompt_template + "\n\nThe cat sat on the mat."
    assert params == TOOLS["/ai/paraphrase"].generation_params


def test_prompt_field_is_accepted(client, gateway) -> None:
    response = client.post("/ai/grammar", json={"prompt": "their going"})

    assert response.status_code == 200
    assert gateway.calls[0][1].endswith("\n\ntheir going")


def test_prompt_field_takes_precedence_over_text(client, gateway) -> None:
    response = client.post("/ai/improve", json={"text": "from-text", "prompt": "from-prompt"})

    assert response.status_code == 200
    assert gateway.calls[0][1].endswith("\n\nfrom-prompt")


def test_text_is_used_when_prompt_is_blank(client, gateway) -> None:
    response = client.post("/ai/improve", json={"prompt": "  ", "text": "from-text"})

    assert response.status_code == 200
    assert gateway.calls[0][1].endswith("\n\nfrom-text")


def test_first_non_blank_field_wins(client, gateway) -> None:
    response = client.post("/ai/improve", json={"text": "   ", "prompt": "use me"})

    assert response.status_code == 200
    assert gateway.calls[0][1].endswith("\n\nuse me")


@pytest.mark.parametrize("path", ["/ai/unknown", "/api/paraphrase", "/ai", "/health"])
def test_unknown_route_returns_404_without_calling_upstream(client, gateway, path) -> None:
    response = client.post(path, json={"text": "hello"})

    assert response.status_code == 404
    body = response.get_json()
    assert body["success"] is False
    assert body["code"] == "UnknownRoute"
    assert body["availableEndpoints"] == list(TOOLS)
    assert gateway.calls == []


def test_root_path_returns_404(client, gateway) -> None:
    response = client.post("/", json={"text": "hello"})

    assert response.status_code == 404
    assert response.get_json()["availableEndpoints"] == list(TOOLS)
    assert gateway.calls == []


def test_input_over_limit_is_rejected(client, gateway) -> None:
    response = client.post("/ai/detect", json={"text": "a" * 50_001})

    assert response.status_code == 400
    body = response.get_json()
    assert body["code"] == "InputTooLarge"
    assert "50,000" in body["error"]
    assert gateway.calls == []


def test_body_over_request_size_limit_is_input_too_large(client, gateway) -> None:
    response = client.post("/ai/detect", json={"text": "a" * 2_000_000})

    assert response.status_code == 400
    assert response.get_json()["code"] == "InputTooLarge"
    assert "Access-Control-Allow-Origin" in response.headers
    assert gateway.calls == []


def test_input_at_limit_is_accepted(client, gateway) -> None:
    response = client.post("/ai/detect", json={"text": "a" * 50_000})

    assert response.status_code == 200
    assert len(gateway.calls) == 1


@pytest.mark.parametrize("payload", [{"text": ""}, {"text": "   \n\t"}, {}, {"text": 42}])
def test_missing_input_is_rejected(client, gateway, payload) -> None:
    response = client.post("/ai/humanize", json=payload)

    assert response.status_code == 400
    assert response.get_json()["code"] == "MissingInput"
    assert gateway.calls == []


@pytest.mark.parametrize("data", ["{not json", "[1, 2, 3]", "null"])
def test_malformed_body_is_rejected(client, gateway, data) -> None:
    response = client.post("/ai/humanize", data=data, content_type="application/json")

    assert response.status_code == 400
    assert response.get_json()["code"] == "InvalidPayload"
    assert gateway.calls == []


def test_missing_api_key_fails_closed() -> None:
    gateway = FakeGateway()
    client = create_app(settings=make_settings(api_key=None), gateway=gateway).test_client()

    response = client.post("/ai/humanize", json={"text": "hello"})

    assert response.status_code == 500
    assert response.get_json()["code"] == "ConfigurationError"
    assert gateway.calls == []
    assert client.get("/health").get_json()["hasApiKey"] is False


@pytest.mark.parametrize(
    ("kind", "status"),
    [
        (ErrorKind.BAD_REQUEST, 400),
        (ErrorKind.AUTH_FAILURE, 500),
        (ErrorKind.RATE_LIMITED, 429),
        (ErrorKind.UPSTREAM_UNAVAILABLE, 503),
        (ErrorKind.CONNECTION_FAILURE, 503),
        (ErrorKind.EMPTY_RESPONSE, 500),
        (ErrorKind.UNKNOWN_UPSTREAM, 500),
    ],
)
def test_upstream_failures_map_to_http_status(kind, status) -> None:
    client = create_app(settings=make_settings(), gateway=FakeGateway(Failure(kind))).test_client()

    response = client.post("/ai/improve", json={"text": "hello"})

    assert response.status_code == status
    body = response.get_json()
    assert body["success"] is False
    assert body["error"] == kind.message
    assert body["code"] == kind.value
    assert "timestamp" in body


def test_upstream_rate_limit_message(client, gateway) -> None:
    gateway.result = Failure(ErrorKind.RATE_LIMITED)

    response = client.post("/ai/improve", json={"text": "hello"})

    assert response.status_code == 429
    assert "rate limit" in response.get_json()["error"]


def test_unexpected_exception_is_logged_and_answered(tmp_path, monkeypatch) -> None:
    log_path = tmp_path / "last_error.log"
    monkeypatch.setattr(app_module, "ERROR_LOG", str(log_path))
    client = create_app(
        settings=make_settings(), gateway=FakeGateway(ValueError("boom"))
    ).test_client()

    response = client.post("/ai/improve", json={"text": "private user text"})

    assert response.status_code == 500
    assert response.get_json()["error"] == "Internal server error. Please try again."
    assert response.get_json()["code"] == "InternalError"
    logged = log_path.read_text(encoding="utf-8")
    assert "tool=/ai/improve" in logged
    assert "ValueError: boom" in logged
    assert "private user text" not in logged


@pytest.mark.parametrize("path", ["/ai/paraphrase", "/health", "/no/such/path"])
def test_preflight_echoes_allowed_origin(client, path) -> None:
    response = client.options(path, headers={"Origin": "http://localhost:5000"})

    assert response.status_code == 204
    assert response.get_data() == b""
    assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:5000"
    assert "POST" in response.headers["Access-Control-Allow-Methods"]


def test_preflight_with_foreign_origin_gets_canonical_origin(client) -> None:
    response = client.options("/ai/paraphrase", headers={"Origin": "https://evil.example"})

    assert response.status_code == 204
    assert response.headers["Access-Control-Allow-Origin"] == SITE_CONFIG["canonical_origin"]


def test_error_responses_carry_cors_headers(client) -> None:
    origin = "https://preview.nexusrankpro.pages.dev"
    response = client.post("/ai/nope", json={"text": "x"}, headers={"Origin": origin})

    assert response.status_code == 404
    assert response.headers["Access-Control-Allow-Origin"] == origin


def test_wrong_method_returns_405(client, gateway) -> None:
    response = client.get("/ai/paraphrase")

    assert response.status_code == 405
    assert response.get_json()["success"] is False
    assert "Access-Control-Allow-Origin" in response.headers
    assert gateway.calls == []


def test_rate_limited_client_gets_429() -> None:
    gateway = FakeGateway()
    client = create_app(
        settings=make_settings(),
        gateway=gateway,
        rate_limiter=SlidingWindowRateLimiter(max_requests=2),
    ).test_client()
    headers = {"CF-Connecting-IP": "203.0.113.7"}

    statuses = [
        client.post("/ai/improve", json={"text": "hi"}, headers=headers).status_code
        for _ in range(3)
    ]

    assert statuses == [200, 200, 429]
    assert len(gateway.calls) == 2
    other = client.post("/ai/improve", json={"text": "hi"}, headers={"CF-Connecting-IP": "198.51.100.1"})
    assert other.status_code == 200


def test_flask_cli_discovers_app_factory(monkeypatch) -> None:
    from flask.cli import find_best_app

    import settings as settings_module

    monkeypatch.setattr(settings_module, "load_dotenv", lambda: None)
    monkeypatch.setenv("AI_PROVIDER", "gemini_api")
    monkeypatch.setenv("GEMINI_API_KEY", "cli-key")

    found = find_best_app(app_module)

    assert found.extensions["nexusrank"]["settings"].api_key == "cli-key"
    assert found.test_client().get("/health").status_code == 200
