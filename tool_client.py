"""
Client for the worker's tool endpoints, as used by the site's tool pages.

    client = ToolClient("https://nexusrank-ai-pro.example.workers.dev")
    client.call_tool("grammar", "their going too the store")
    → {"success": True, "content": "They're going to the store."}
"""
import logging

import requests

from tools import DEFAULT_TOOL, TOOLS

logger = logging.getLogger(__name__)

ENDPOINTS: dict[str, str] = {tool.key: path for path, tool in TOOLS.items()}


def endpoint_for(tool_key: str) -> str:
    """Route path for a tool key; unknown keys use the text improver."""
    return ENDPOINTS.get(tool_key, DEFAULT_TOOL)


class ToolClient:
    def __init__(self, base_url: str, session: requests.Session | None = None,
                 timeout: float = 90.0):
        self.base_url = base_url.rstrip("/")
        self.session  = session or requests.Session()
        self.timeout  = timeout

    def call_tool(self, tool_key: str, text: str) -> dict:
        """Run one tool and return {"success", "content"} or {"success", "error"}."""
        text = (text or "").strip()
        if not text:
            return {"success": False, "error": "Please enter some text to process."}

        url = self.base_url + endpoint_for(tool_key)
        try:
            response = self.session.post(url, json={"text": text}, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("AI API error: %s", e)
            return {"success": False, "error": "Failed to connect to AI service"}

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.ok or data.get("error"):
            return {"success": False, "error": data.get("error") or f"HTTP {response.status_code}"}
        return {"success": True, "content": data.get("content") or "No content returned"}
