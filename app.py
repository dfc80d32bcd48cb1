import logging
import traceback
from datetime import datetime, timezone

from flask import Flask, request, jsonify, Response
from werkzeug.exceptions import HTTPException

from ai_client import load_gateway
from cors import cors_headers
from generation import ErrorKind, Failure
from rate_limit import SlidingWindowRateLimiter, client_id_from_headers
from settings import load_settings
from site_config import SITE_CONFIG
from tools import TOOLS

logger = logging.getLogger(__name__)

ERROR_LOG = "last_error.log"


# ── Helpers ───────────────────────────────────────────────────────────────────

def _log_error(context: str, exc: Exception) -> None:
    """Write the last error with timestamp to last_error.log (no user text)."""
    with open(ERROR_LOG, "w", encoding="utf-8") as f:
        f.write(f"[{datetime.now().isoformat(timespec='seconds')}] {context}\n\n")
        if exc.__traceback__:
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=f)
        else:
            f.write(f"{type(exc).__name__}: {exc}\n")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _error_response(kind: ErrorKind, message: str | None = None, status: int | None = None, **extra):
    body = {
        "success":   False,
        "error":     message or kind.message,
        "code":      kind.value,
        "timestamp": _timestamp(),
        **extra,
    }
    return jsonify(body), status or kind.http_status


def _extract_input(body: dict) -> str | None:
    """First non-blank string among the "prompt" and "text" fields."""
    for field in ("prompt", "text"):
        value = body.get(field)
        if isinstance(value, str) and value.strip():
            return value
    return None


# ── App factory ───────────────────────────────────────────────────────────────

def create_app(settings=None, gateway=None, tools=None, rate_limiter=None) -> Flask:
    """Build the worker app. Every collaborator can be swapped for tests."""
    settings = settings or load_settings()
    gateway  = gateway or load_gateway(settings)
    tools    = TOOLS if tools is None else tools
    limiter  = rate_limiter or SlidingWindowRateLimiter(settings.rate_limit_per_minute)

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = 1024 * 1024  # 1 MB, well above 50k chars of JSON
    app.json.sort_keys = False
    app.extensions["nexusrank"] = {
        "settings": settings, "gateway": gateway, "tools": tools, "rate_limiter": limiter,
    }

    def _unknown_route(path: str):
        return _error_response(
            ErrorKind.UNKNOWN_ROUTE,
            path=path,
            availableEndpoints=list(tools),
            service=SITE_CONFIG["service_name"],
        )

    @app.before_request
    def preflight():
        # Answered before routing so every path accepts a preflight
        if request.method == "OPTIONS":
            return Response(status=204)

    @app.after_request
    def apply_cors(response):
        response.headers.update(cors_headers(request.headers.get("Origin")))
        return response

    @app.errorhandler(HTTPException)
    def http_error(exc: HTTPException):
        if exc.code == 404:
            return _unknown_route(request.path)
        if exc.code == 413:
            return _error_response(ErrorKind.INPUT_TOO_LARGE)
        body = {
            "success":   False,
            "error":     exc.description or exc.name,
            "code":      exc.name.replace(" ", ""),
            "timestamp": _timestamp(),
        }
        return jsonify(body), exc.code

    # ── Routes ────────────────────────────────────────────────────────────────

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({
            "status":     "healthy",
            "timestamp":  _timestamp(),
            "service":    SITE_CONFIG["service_name"],
            "aiProvider": settings.ai_provider,
            "hasApiKey":  settings.has_api_key,
            "version":    SITE_CONFIG["version"],
        })

    @app.route("/<path:tool_path>", methods=["POST"])
    def run_tool(tool_path: str):
        path = "/" + tool_path

        client_id = client_id_from_headers(request.headers, request.remote_addr)
        if not limiter.is_allowed(client_id):
            logger.info("Rate limit exceeded for client %s", client_id)
            return _error_response(
                ErrorKind.RATE_LIMITED, "Rate limit exceeded. Please try again later."
            )

        body = request.get_json(force=True, silent=True)
        if not isinstance(body, dict):
            return _error_response(ErrorKind.INVALID_PAYLOAD)

        input_text = _extract_input(body)
        if input_text is None:
            return _error_response(ErrorKind.MISSING_INPUT)
        if len(input_text) > settings.max_input_chars:
            return _error_response(ErrorKind.INPUT_TOO_LARGE)

        tool = tools.get(path)
        if tool is None:
            return _unknown_route(path)

        # Fail closed: without a credential nothing is sent upstream
        if not settings.api_key:
            logger.error("No API key configured for provider %s", settings.ai_provider)
            return _error_response(ErrorKind.CONFIGURATION_ERROR)

        try:
            result = gateway.generate(
                settings.api_key, tool.compose_prompt(input_text), tool.generation_params
            )
        except Exception as e:
            _log_error(f"tool={path}", e)
            logger.exception("AI request error for %s", path)
            return _error_response(ErrorKind.INTERNAL_ERROR)

        if isinstance(result, Failure):
            return _error_response(result.kind, result.message)

        return jsonify({
            "success":   True,
            "content":   result.content,
            "tool":      tool.display_name,
            "timestamp": _timestamp(),
        })

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    print("Starting on http://localhost:5000")
    create_app().run(debug=True, port=5000)
