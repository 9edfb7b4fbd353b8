import asyncio
import logging
from typing import Optional

from agent.llm.base import LLMClient, LLMResponse
from agent.models import ModelDescriptor, ModelRegistry
from agent.modules.normalize import normalize
from agent.prompts import generate as prompts
from db import ContentRecord, ContentStore
from errors import ValidationError

logger = logging.getLogger(__name__)


class ContentGenerator:
    """Runs one generate-and-persist request.

    validate → resolve model → call model → normalize → persist. Any stage
    that fails raises and nothing after it runs. There is no retry: a second
    call costs money and is not guaranteed to fix a malformed reply.
    """

    def __init__(
        self,
        llm: LLMClient,
        registry: ModelRegistry,
        store: ContentStore,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ):
        self._llm = llm
        self._registry = registry
        self._store = store
        self._temperature = temperature
        self._max_tokens = max_tokens

    def resolve_model(self, model_id: Optional[str]) -> ModelDescriptor:
        if model_id is None:
            return self._registry.default
        model = self._registry.get(model_id)
        if model is None:
            raise ValidationError(
                f"Unknown model {model_id!r}",
                f"Invalid model. Choose one of: {', '.join(m.id for m in self._registry)}",
            )
        return model

    async def generate(self, owner_id: str, topic: str, model_id: Optional[str] = None) -> ContentRecord:
        topic = (topic or "").strip() if isinstance(topic, str) else ""
        if not topic:
            raise ValidationError(
                "Empty topic",
                "Topic is required and must be a non-empty string",
            )
        model = self.resolve_model(model_id)

        logger.info("Generating content for user=%s model=%s", owner_id, model.id)
        response: LLMResponse = await self._llm.complete(
            system=prompts.SYSTEM,
            user=prompts.USER_TEMPLATE.format(topic=topic),
            model=model.id,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )
        content = normalize(response.content, model.id)

        record = await asyncio.to_thread(self._store.create, owner_id, topic, content, model.id)
        logger.info(
            "Saved content id=%s for user=%s (%d tokens)",
            record.id, owner_id, response.tokens_used,
        )
        return record
