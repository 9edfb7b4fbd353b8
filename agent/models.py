"""
Registry of selectable AI models.

Built once at startup and shared read-only; nothing mutates it afterwards.
"""
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class ModelDescriptor:
    id: str
    name: str
    provider: str
    description: str = ""
    capabilities: frozenset[str] = field(default_factory=frozenset)
    is_default: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "provider": self.provider,
            "description": self.description,
            "capabilities": sorted(self.capabilities),
            "isDefault": self.is_default,
        }


DEFAULT_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        id="tngtech/deepseek-r1t2-chimera:free",
        name="DeepSeek R1T2 Chimera",
        provider="TNG Technology",
        description="Advanced reasoning model with superior problem-solving capabilities",
        capabilities=frozenset({"text-generation", "reasoning", "analysis"}),
        is_default=True,
    ),
    ModelDescriptor(
        id="z-ai/glm-4.5-air:free",
        name="GLM 4.5 Air",
        provider="Z-AI",
        description="Lightweight model optimized for speed and efficiency",
        capabilities=frozenset({"text-generation", "fast-response"}),
    ),
)

# Heuristic only: display names for model ids that are not in the registry
# (e.g. records generated before a model was retired). Not authoritative.
_FALLBACK_NAMES: tuple[tuple[str, str], ...] = (
    ("deepseek", "DeepSeek"),
    ("gemini", "Gemini"),
    ("glm", "GLM"),
)


class ModelRegistry:
    def __init__(self, models: tuple[ModelDescriptor, ...] | list[ModelDescriptor]):
        models = tuple(models)
        if not models:
            raise ValueError("Model registry cannot be empty")
        defaults = [m for m in models if m.is_default]
        if len(defaults) != 1:
            raise ValueError(f"Exactly one default model required, found {len(defaults)}")
        ids = [m.id for m in models]
        if len(set(ids)) != len(ids):
            raise ValueError("Duplicate model ids in registry")
        self._models = models
        self._by_id = {m.id: m for m in models}
        self._default = defaults[0]

    def __iter__(self):
        return iter(self._models)

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._by_id

    @property
    def default(self) -> ModelDescriptor:
        return self._default

    def get(self, model_id: str) -> Optional[ModelDescriptor]:
        return self._by_id.get(model_id)

    def display_name(self, model_id: str) -> str:
        """Human-readable name for a model id, registry first, then heuristics."""
        model = self._by_id.get(model_id)
        if model:
            return model.name
        lowered = model_id.lower()
        for fragment, name in _FALLBACK_NAMES:
            if fragment in lowered:
                return name
        return model_id.split("/")[-1].split(":")[0] or model_id

    def to_list(self) -> list[dict]:
        return [m.to_dict() for m in self._models]


def load_registry(path: str | None = None) -> ModelRegistry:
    """Build the registry from a JSON file, or the built-in list when no path is set.

    File format: {"models": [{"id", "name", "provider", "description",
    "capabilities": [...], "isDefault": bool}, ...]}
    """
    if not path:
        return ModelRegistry(DEFAULT_MODELS)

    data = json.loads(Path(path).expanduser().read_text(encoding="utf-8"))
    models = [
        ModelDescriptor(
            id=str(item["id"]),
            name=str(item.get("name") or item["id"]),
            provider=str(item.get("provider", "")),
            description=str(item.get("description", "")),
            capabilities=frozenset(item.get("capabilities", [])),
            is_default=bool(item.get("isDefault", False)),
        )
        for item in data.get("models", [])
    ]
    return ModelRegistry(models)
