import logging

import openai
from openai import AsyncOpenAI

from agent.llm.base import LLMClient, LLMResponse, failure_for_status
from errors import UpstreamFailure, UpstreamServiceError

logger = logging.getLogger(__name__)


class OpenAIClient(LLMClient):
    """OpenAI-compatible chat completions (OpenAI, OpenRouter, local gateways)."""

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float = 60.0,
        default_headers: dict[str, str] | None = None,
    ):
        kwargs = {"api_key": api_key, "timeout": timeout, "max_retries": 0}
        if base_url:
            kwargs["base_url"] = base_url
        if default_headers:
            kwargs["default_headers"] = default_headers
        self._client = AsyncOpenAI(**kwargs)

    async def complete(
        self,
        system: str,
        user: str,
        model: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> LLMResponse:
        try:
            resp = await self._client.chat.completions.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
            )
        except openai.APIConnectionError as exc:
            # includes APITimeoutError
            logger.warning("OpenAI-compatible call to %s could not connect: %s", model, exc)
            raise UpstreamServiceError(UpstreamFailure.UNAVAILABLE, str(exc)) from exc
        except openai.APIStatusError as exc:
            logger.warning("OpenAI-compatible call to %s failed with %d", model, exc.status_code)
            raise UpstreamServiceError(failure_for_status(exc.status_code), str(exc)) from exc
        except openai.APIError as exc:
            raise UpstreamServiceError(UpstreamFailure.UNKNOWN, str(exc)) from exc

        content = resp.choices[0].message.content if resp.choices else ""
        tokens = resp.usage.total_tokens if resp.usage else 0
        return LLMResponse(content=content or "", tokens_used=tokens, model=model)
