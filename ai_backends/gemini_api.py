"""
AI backend: Google Gemini
Text generation through the google-genai SDK with per-category safety settings.
Requires GEMINI_API_KEY in environment.
"""
import logging

import httpx
from google import genai
from google.genai import errors, types

from generation import ErrorKind, Failure, GenerationResult, classify_status, first_fragment
from tools import GenerationParams

logger = logging.getLogger(__name__)

HARM_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


def build_config(params: GenerationParams) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        temperature=params.temperature,
        top_k=params.top_k,
        top_p=params.top_p,
        max_output_tokens=params.max_output_tokens,
        stop_sequences=list(params.stop_sequences),
        safety_settings=[
            types.SafetySetting(category=category, threshold=params.safety_threshold)
            for category in HARM_CATEGORIES
        ],
    )


def extract_text(response):
    """Return the first text part of the first candidate, or None."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    if not parts:
        return None
    return getattr(parts[0], "text", None)


def generate(api_key: str, prompt: str, params: GenerationParams, *,
             model: str, timeout: float) -> GenerationResult:
    """Send one prompt to Gemini and return the first generated fragment.

    Args:
        api_key: Gemini API key.
        prompt:  Full prompt (tool template plus user text).
        params:  Sampling, length and safety settings.
        model:   Gemini model name, e.g. "gemini-2.5-flash".
        timeout: Seconds to wait for the whole call.
    """
    client = genai.Client(
        api_key=api_key,
        # HttpOptions takes milliseconds
        http_options=types.HttpOptions(timeout=int(timeout * 1000)),
    )
    try:
        response = client.models.generate_content(
            model=model,
            contents=prompt,
            config=build_config(params),
        )
    except errors.APIError as e:
        logger.error("Gemini API error %s: %s", e.code, e.message)
        return Failure(classify_status(e.code or 0))
    except (httpx.HTTPError, OSError) as e:
        logger.error("Gemini API call error: %s", e)
        return Failure(ErrorKind.CONNECTION_FAILURE)

    result = first_fragment(extract_text(response))
    if not result.ok:
        logger.error("Gemini returned no usable text (model=%s)", model)
    return result
