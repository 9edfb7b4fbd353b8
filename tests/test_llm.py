"""Tests for the provider clients and factory in agent.llm."""
import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import anthropic
import httpx
import openai
import pytest

from agent.llm import get_llm_client
from agent.llm.anthropic_client import AnthropicClient
from agent.llm.base import failure_for_status
from agent.llm.openai_client import OpenAIClient
from config import Settings
from errors import UpstreamFailure, UpstreamServiceError

_REQUEST = httpx.Request("POST", "https://example.test/v1/chat/completions")


def _status_error(cls, status: int):
    return cls("boom", response=httpx.Response(status, request=_REQUEST), body=None)


def _openai_client(side_effect=None, return_value=None) -> OpenAIClient:
    client = OpenAIClient(api_key="test-key")
    client._client = SimpleNamespace(
        chat=SimpleNamespace(
            completions=SimpleNamespace(
                create=AsyncMock(side_effect=side_effect, return_value=return_value)
            )
        )
    )
    return client


def _anthropic_client(side_effect=None, return_value=None) -> AnthropicClient:
    client = AnthropicClient(api_key="test-key")
    client._client = SimpleNamespace(
        messages=SimpleNamespace(create=AsyncMock(side_effect=side_effect, return_value=return_value))
    )
    return client


@pytest.mark.parametrize("status, kind", [
    (429, UpstreamFailure.RATE_LIMITED),
    (402, UpstreamFailure.RATE_LIMITED),
    (401, UpstreamFailure.AUTH_FAILED),
    (403, UpstreamFailure.AUTH_FAILED),
    (400, UpstreamFailure.BAD_REQUEST),
    (404, UpstreamFailure.BAD_REQUEST),
    (500, UpstreamFailure.UNAVAILABLE),
    (503, UpstreamFailure.UNAVAILABLE),
    (418, UpstreamFailure.UNKNOWN),
])
def test_failure_for_status(status, kind):
    assert failure_for_status(status) is kind


class TestOpenAIClient:
    def test_success(self):
        resp = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content='{"ok": true}'))],
            usage=SimpleNamespace(total_tokens=123),
        )
        client = _openai_client(return_value=resp)
        result = asyncio.run(client.complete("sys", "usr", model="m/1", max_tokens=10, temperature=0.5))

        assert result.content == '{"ok": true}'
        assert result.tokens_used == 123
        assert result.model == "m/1"
        kwargs = client._client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "m/1"
        assert kwargs["temperature"] == 0.5
        assert kwargs["max_tokens"] == 10
        assert kwargs["messages"][1] == {"role": "user", "content": "usr"}

    def test_empty_content(self):
        resp = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=None))],
            usage=None,
        )
        result = asyncio.run(_openai_client(return_value=resp).complete("s", "u", model="m"))
        assert result.content == ""
        assert result.tokens_used == 0

    @pytest.mark.parametrize("exc, kind", [
        (_status_error(openai.RateLimitError, 429), UpstreamFailure.RATE_LIMITED),
        (_status_error(openai.AuthenticationError, 401), UpstreamFailure.AUTH_FAILED),
        (_status_error(openai.BadRequestError, 400), UpstreamFailure.BAD_REQUEST),
        (_status_error(openai.InternalServerError, 502), UpstreamFailure.UNAVAILABLE),
        (openai.APIConnectionError(request=_REQUEST), UpstreamFailure.UNAVAILABLE),
        (openai.APITimeoutError(request=_REQUEST), UpstreamFailure.UNAVAILABLE),
    ])
    def test_errors_translated(self, exc, kind):
        client = _openai_client(side_effect=exc)
        with pytest.raises(UpstreamServiceError) as exc_info:
            asyncio.run(client.complete("s", "u", model="m"))
        assert exc_info.value.kind is kind
        assert client._client.chat.completions.create.await_count == 1


class TestAnthropicClient:
    def test_success(self):
        msg = SimpleNamespace(
            content=[SimpleNamespace(type="text", text="hello")],
            usage=SimpleNamespace(input_tokens=3, output_tokens=4),
        )
        result = asyncio.run(_anthropic_client(return_value=msg).complete("s", "u", model="claude"))
        assert result.content == "hello"
        assert result.tokens_used == 7

    @pytest.mark.parametrize("exc, kind", [
        (_status_error(anthropic.RateLimitError, 429), UpstreamFailure.RATE_LIMITED),
        (_status_error(anthropic.AuthenticationError, 401), UpstreamFailure.AUTH_FAILED),
        (_status_error(anthropic.InternalServerError, 500), UpstreamFailure.UNAVAILABLE),
        (anthropic.APIConnectionError(request=_REQUEST), UpstreamFailure.UNAVAILABLE),
    ])
    def test_errors_translated(self, exc, kind):
        with pytest.raises(UpstreamServiceError) as exc_info:
            asyncio.run(_anthropic_client(side_effect=exc).complete("s", "u", model="claude"))
        assert exc_info.value.kind is kind


class TestFactory:
    def test_openrouter_default(self):
        client = get_llm_client(Settings(openrouter_api_key="k", site_name="TubeGenie"))
        assert isinstance(client, OpenAIClient)
        assert str(client._client.base_url).startswith("https://openrouter.ai/api/v1")

    def test_anthropic(self):
        assert isinstance(get_llm_client(Settings(llm_provider="anthropic", anthropic_api_key="k")), AnthropicClient)

    def test_unknown_provider(self):
        with pytest.raises(ValueError):
            get_llm_client(Settings(llm_provider="carrier-pigeon"))
