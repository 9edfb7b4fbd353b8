from agent.llm.base import LLMClient
from config import Settings


def get_llm_client(settings: Settings) -> LLMClient:
    provider = settings.llm_provider.lower()

    if provider == "openrouter":
        from agent.llm.openai_client import OpenAIClient
        headers = {}
        if settings.site_url:
            headers["HTTP-Referer"] = settings.site_url
        if settings.site_name:
            headers["X-Title"] = settings.site_name
        return OpenAIClient(
            api_key=settings.openrouter_api_key,
            base_url=settings.openrouter_base_url,
            timeout=settings.llm_timeout_seconds,
            default_headers=headers or None,
        )

    if provider == "openai":
        from agent.llm.openai_client import OpenAIClient
        return OpenAIClient(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url or None,
            timeout=settings.llm_timeout_seconds,
        )

    if provider == "anthropic":
        from agent.llm.anthropic_client import AnthropicClient
        return AnthropicClient(
            api_key=settings.anthropic_api_key,
            timeout=settings.llm_timeout_seconds,
        )

    raise ValueError(f"Unknown LLM_PROVIDER: {provider!r}")
