"""
Runtime configuration loaded once at startup from the environment (.env).

Only the upstream credential is secret; it is never logged, only its presence.
"""
import os
import logging
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 50_000

# provider → (credential variable, model variable, default model)
PROVIDERS: dict[str, tuple[str, str, str]] = {
    "gemini_api":   ("GEMINI_API_KEY",   "GEMINI_MODEL",   "gemini-2.5-flash"),
    "deepseek_api": ("DEEPSEEK_API_KEY", "DEEPSEEK_MODEL", "deepseek-chat"),
}


@dataclass(frozen=True)
class Settings:
    ai_provider:           str
    api_key:               str | None
    model:                 str
    upstream_timeout:      float
    rate_limit_per_minute: int
    max_input_chars:       int = MAX_INPUT_CHARS

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}.")


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}.")


def load_settings() -> Settings:
    """Read .env and the process environment into an immutable Settings.

    Raises RuntimeError for an unknown AI_PROVIDER or malformed numbers.
    A missing credential is allowed here: tool calls fail closed instead.
    """
    load_dotenv()
    provider = os.environ.get("AI_PROVIDER", "gemini_api").strip() or "gemini_api"
    if provider not in PROVIDERS:
        raise RuntimeError(
            f"AI provider '{provider}' is not supported. "
            f"Set AI_PROVIDER to one of: {', '.join(sorted(PROVIDERS))}."
        )
    key_var, model_var, default_model = PROVIDERS[provider]

    api_key = os.environ.get(key_var, "").strip() or None
    settings = Settings(
        ai_provider=provider,
        api_key=api_key,
        model=os.environ.get(model_var, "").strip() or default_model,
        upstream_timeout=_float_env("UPSTREAM_TIMEOUT_SECONDS", 60.0),
        rate_limit_per_minute=_int_env("RATE_LIMIT_PER_MINUTE", 100),
    )
    if not settings.has_api_key:
        logger.warning("%s is not set; AI tool requests will fail until it is configured.", key_var)
    logger.info("Loaded settings: provider=%s model=%s hasApiKey=%s",
                settings.ai_provider, settings.model, settings.has_api_key)
    return settings
