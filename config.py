from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    environment: str = "development"  # development | production
    log_level: str = "INFO"

    # HTTP
    host: str = "0.0.0.0"
    port: int = 5000
    api_prefix: str = ""
    cors_origins: str = "http://localhost:3000"  # comma-separated

    llm_provider: str = "openrouter"  # openrouter | openai | anthropic

    # OpenRouter (OpenAI-compatible, model id chosen per request)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    site_url: str = ""   # sent as HTTP-Referer for OpenRouter rankings
    site_name: str = ""  # sent as X-Title

    # OpenAI / custom
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"

    # Anthropic
    anthropic_api_key: str = ""

    # Generation
    llm_timeout_seconds: float = Field(default=60.0, gt=0)
    generation_temperature: float = Field(default=0.7, ge=0, le=2)
    generation_max_tokens: int = Field(default=1000, ge=1)
    # Optional JSON file replacing the built-in model list
    models_config: str = ""

    # Storage
    db_path: str = "~/.tubegenie/content.db"
    users_config: str = "config/users.json"

    # Rate limit
    rate_limit_generate_window_seconds: int = Field(default=3600, ge=1)
    rate_limit_generate_per_window: int = Field(default=20, ge=1)
    rate_limit_read_window_seconds: int = Field(default=900, ge=1)
    rate_limit_read_per_window: int = Field(default=200, ge=1)
    rate_limit_delete_window_seconds: int = Field(default=900, ge=1)
    rate_limit_delete_per_window: int = Field(default=50, ge=1)

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
