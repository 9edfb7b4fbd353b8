import logging

import anthropic

from agent.llm.base import LLMClient, LLMResponse, failure_for_status
from errors import UpstreamFailure, UpstreamServiceError

logger = logging.getLogger(__name__)


class AnthropicClient(LLMClient):
    def __init__(self, api_key: str, timeout: float = 60.0):
        self._client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)

    async def complete(
        self,
        system: str,
        user: str,
        model: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> LLMResponse:
        try:
            msg = await self._client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=[{"role": "user", "content": user}],
            )
        except anthropic.APIConnectionError as exc:
            logger.warning("Anthropic call to %s could not connect: %s", model, exc)
            raise UpstreamServiceError(UpstreamFailure.UNAVAILABLE, str(exc)) from exc
        except anthropic.APIStatusError as exc:
            logger.warning("Anthropic call to %s failed with %d", model, exc.status_code)
            raise UpstreamServiceError(failure_for_status(exc.status_code), str(exc)) from exc
        except anthropic.APIError as exc:
            raise UpstreamServiceError(UpstreamFailure.UNKNOWN, str(exc)) from exc

        content = "".join(
            block.text for block in msg.content if getattr(block, "type", "") == "text"
        )
        tokens = (msg.usage.input_tokens or 0) + (msg.usage.output_tokens or 0)
        return LLMResponse(content=content, tokens_used=tokens, model=model)
