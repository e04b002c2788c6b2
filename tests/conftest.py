"""Shared fixtures: settings, mocked LLM transport, sample words."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from speakerline.config import Settings
from speakerline.services.llm_client import ChatCompletionClient
from speakerline.transcript.models import Word


def completion_payload(content: str) -> dict[str, Any]:
    """OpenAI-compatible chat completion body with one assistant message."""
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def llm_settings() -> Settings:
    return Settings(
        LLM_API_KEY="test-key",
        LLM_BASE_URL="https://llm.test/v1",
        LLM_MODEL="test-model",
        _env_file=None,
    )


@pytest.fixture
def make_llm_client(llm_settings: Settings) -> Callable[..., ChatCompletionClient]:
    """Build a client whose HTTP calls are answered by `handler` and recorded in `calls`."""

    def _make(handler: Callable[[httpx.Request], httpx.Response], calls: list | None = None) -> ChatCompletionClient:
        def _recording(request: httpx.Request) -> httpx.Response:
            if calls is not None:
                calls.append(request)
            return handler(request)

        return ChatCompletionClient(llm_settings, transport=httpx.MockTransport(_recording))

    return _make


@pytest.fixture
def json_reply() -> Callable[[Any], Callable[[httpx.Request], httpx.Response]]:
    """Handler factory replying with `obj` serialized as the assistant message content."""

    def _reply(obj: Any) -> Callable[[httpx.Request], httpx.Response]:
        content = obj if isinstance(obj, str) else json.dumps(obj)
        return lambda request: httpx.Response(200, json=completion_payload(content))

    return _reply


@pytest.fixture
def words() -> list[Word]:
    return [
        Word("hello", 0, 400),
        Word("doctor", 400, 900),
        Word("hi", 1500, 1700),
        Word("how", 1700, 1900),
        Word("are", 1900, 2100),
        Word("you", 2100, 2400),
    ]
