"""
Hosted LLM client: OpenAI-compatible chat completions (Groq by default) over httpx.

JSON mode only: every call asks for a JSON object and returns the parsed payload.
Raises ValueError when not configured or when the reply is empty / not JSON;
httpx.HTTPError on transport or status errors. Callers decide how to fall back.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx

from speakerline.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _extract_json(raw: str) -> Any:
    """Parse JSON from model response (may be wrapped in markdown code block)."""
    raw = raw.strip()
    if raw.startswith("```"):
        raw = re.sub(r"^```(?:json)?\s*", "", raw)
        raw = re.sub(r"\s*```\s*$", "", raw)
    return json.loads(raw)


def _message_content(data: Any) -> str:
    """choices[0].message.content, or "" when the payload has another shape."""
    if not isinstance(data, dict):
        return ""
    choices = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return (content or "").strip() if isinstance(content, str) else ""


class ChatCompletionClient:
    """
    Thin async client for /chat/completions. One HTTP request per call; no retries.
    transport: optional httpx transport (e.g. httpx.MockTransport in tests).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def configured(self) -> bool:
        return self._settings.llm_configured

    @property
    def model(self) -> str:
        return self._settings.LLM_MODEL

    async def complete_json(self, prompt: str, system: str | None = None) -> Any:
        """Send one user prompt (plus optional system prompt); return parsed JSON reply."""
        if not self._settings.LLM_ENABLED:
            raise ValueError("LLM is disabled (LLM_ENABLED=false)")
        token = self._settings.LLM_API_KEY.strip()
        if not token:
            raise ValueError("LLM_API_KEY is required for LLM calls")

        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        url = f"{self._settings.LLM_BASE_URL.rstrip('/')}/chat/completions"
        payload = {
            "model": self._settings.LLM_MODEL,
            "messages": messages,
            "temperature": self._settings.LLM_TEMPERATURE,
            "response_format": {"type": "json_object"},
        }
        logger.debug("LLM request: model=%s, prompt_len=%d", self._settings.LLM_MODEL, len(prompt))

        async with httpx.AsyncClient(timeout=self._settings.LLM_TIMEOUT_SEC, transport=self._transport) as client:
            resp = await client.post(
                url,
                json=payload,
                headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
            )
            resp.raise_for_status()
            data = resp.json()

        content = _message_content(data)
        if not content:
            raise ValueError("LLM returned empty response")
        try:
            return _extract_json(content)
        except json.JSONDecodeError as e:
            logger.warning("LLM response was not valid JSON: %s", e)
            raise ValueError("LLM response was not valid JSON") from e
