"""
AI client dispatcher.
Selects the upstream backend named by the AI_PROVIDER setting and binds it
to the configured model and timeout.

Supported backends (ai_backends/<name>.py, each must expose generate()):
  gemini_api    : Google Gemini via google-genai SDK (default)
  deepseek_api  : DeepSeek chat completions over HTTPS

To add a new backend:
  1. Create ai_backends/my_provider.py with a generate() function matching
     generate(api_key, prompt, params, *, model, timeout) -> GenerationResult.
  2. Register its credential/model variables in settings.PROVIDERS.
  3. Set AI_PROVIDER=my_provider in .env.
"""
import importlib
import logging

from generation import GenerationResult
from settings import Settings
from tools import GenerationParams

logger = logging.getLogger(__name__)


class Gateway:
    """One upstream provider bound to a model and a per-call timeout.

    Makes a single attempt per call; retrying is left to the caller.
    """

    def __init__(self, backend, model: str, timeout: float):
        self.backend = backend
        self.model   = model
        self.timeout = timeout

    @property
    def name(self) -> str:
        return self.backend.__name__.rsplit(".", 1)[-1]

    def generate(self, api_key: str, prompt: str, params: GenerationParams) -> GenerationResult:
        result = self.backend.generate(
            api_key, prompt, params, model=self.model, timeout=self.timeout
        )
        if not result.ok:
            logger.warning("Upstream %s failed: %s", self.name, result.kind.value)
        return result


def load_gateway(settings: Settings) -> Gateway:
    """Import the configured backend module. Raises RuntimeError if it is missing."""
    provider = settings.ai_provider
    try:
        backend = importlib.import_module(f"ai_backends.{provider}")
    except ModuleNotFoundError:
        raise RuntimeError(
            f"AI backend '{provider}' not found. "
            f"Create ai_backends/{provider}.py or change AI_PROVIDER in .env."
        )
    return Gateway(backend, model=settings.model, timeout=settings.upstream_timeout)
