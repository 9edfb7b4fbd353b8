from abc import ABC, abstractmethod
from dataclasses import dataclass

from errors import UpstreamFailure


@dataclass
class LLMResponse:
    content: str
    tokens_used: int = 0
    model: str = ""


class LLMClient(ABC):
    """Abstract base for all LLM providers.

    Implementations translate their SDK's exceptions into
    errors.UpstreamServiceError so callers never see provider-specific types.
    """

    @abstractmethod
    async def complete(
        self,
        system: str,
        user: str,
        model: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """Send a single-turn completion request to the given model."""
        ...


def failure_for_status(status: int) -> UpstreamFailure:
    """Classify a provider HTTP status code."""
    if status in (402, 429):
        # 402: OpenRouter's "insufficient credits", treated like quota exhaustion
        return UpstreamFailure.RATE_LIMITED
    if status in (401, 403):
        return UpstreamFailure.AUTH_FAILED
    if status in (400, 404, 413, 422):
        return UpstreamFailure.BAD_REQUEST
    if status >= 500:
        return UpstreamFailure.UNAVAILABLE
    return UpstreamFailure.UNKNOWN
