"""AI enrichment endpoints: summarize, improve, apply a custom prompt.

Pure request/response: no retries, no caching. The single-flight rule is
enforced by the caller (EditorSession), not here.
"""

import asyncio

from . import api
from .api import ApiError, AuthContext


def _field(data, key: str, fallback_message: str) -> str:
    """Pull a string result field out of an AI response."""
    if not isinstance(data, dict) or not isinstance(data.get(key), str):
        raise ApiError(fallback_message)
    return data[key]


class EnrichmentService:
    """Async wrapper over /ai."""

    def __init__(self, auth: AuthContext):
        self.auth = auth

    async def _post(self, path: str, payload: dict, fallback_message: str):
        return await asyncio.to_thread(
            api.request,
            self.auth,
            "POST",
            path,
            payload=payload,
            fallback_message=fallback_message,
        )

    async def summarize(self, text: str) -> str:
        """POST /ai/summary {text} -> {summary}."""
        message = "Failed to generate summary"
        data = await self._post("/ai/summary", {"text": text}, message)
        return _field(data, "summary", message)

    async def improve(self, text: str) -> str:
        """POST /ai/improve {text} -> {improved}."""
        message = "Failed to improve content"
        data = await self._post("/ai/improve", {"text": text}, message)
        return _field(data, "improved", message)

    async def apply_prompt(self, text: str, instruction: str) -> str:
        """POST /ai/apply-prompt {text, prompt} -> {modified}."""
        message = "Failed to apply prompt"
        data = await self._post("/ai/apply-prompt", {"text": text, "prompt": instruction}, message)
        return _field(data, "modified", message)
