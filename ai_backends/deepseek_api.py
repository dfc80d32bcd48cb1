"""
AI backend: DeepSeek
OpenAI-compatible chat completions endpoint, called directly with requests.
Requires DEEPSEEK_API_KEY in environment.
"""
import logging

import requests

from generation import ErrorKind, Failure, GenerationResult, classify_status, first_fragment
from tools import GenerationParams

logger = logging.getLogger(__name__)

DEEPSEEK_API_URL = "https://api.deepseek.com/chat/completions"


def build_payload(prompt: str, params: GenerationParams, model: str) -> dict:
    payload = {
        "model":       model,
        "messages":    [{"role": "user", "content": prompt}],
        "temperature": params.temperature,
        "top_p":       params.top_p,
        "max_tokens":  params.max_output_tokens,
        "stream":      False,
    }
    if params.stop_sequences:
        payload["stop"] = list(params.stop_sequences)
    return payload


def extract_text(data):
    """Return choices[0].message.content, or None if the envelope is malformed."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message") or {}
    return message.get("content")


def generate(api_key: str, prompt: str, params: GenerationParams, *,
             model: str, timeout: float) -> GenerationResult:
    """Send one prompt to DeepSeek and return the first generated fragment."""
    try:
        response = requests.post(
            DEEPSEEK_API_URL,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type":  "application/json",
            },
            json=build_payload(prompt, params, model),
            timeout=timeout,
        )
    except requests.RequestException as e:
        logger.error("DeepSeek API call error: %s", e)
        return Failure(ErrorKind.CONNECTION_FAILURE)

    if not response.ok:
        logger.error("DeepSeek API error %s: %s", response.status_code, response.text[:500])
        return Failure(classify_status(response.status_code))

    try:
        data = response.json()
    except ValueError:
        logger.error("DeepSeek returned a non-JSON body")
        return Failure(ErrorKind.EMPTY_RESPONSE)
    return first_fragment(extract_text(data))
