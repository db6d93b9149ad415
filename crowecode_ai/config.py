"""
CroweCode Intelligence service configuration.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Service settings from environment variables (and .env for local dev)."""

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Vendor credentials - a slot with no key is simply not registered
    xai_api_key: str = ""
    anthropic_api_key: str = ""
    openai_api_key: str = ""

    # Vendor endpoints and models, one per registry slot
    primary_endpoint: str = "https://api.x.ai/v1/chat/completions"
    primary_model: str = "grok-4-latest"
    # Every endpoint must speak the chat-completions envelope with bearer auth;
    # Anthropic's native /v1/messages API does not, its compatibility route does
    fallback_endpoint: str = "https://api.anthropic.com/v1/chat/completions"
    fallback_model: str = "claude-3-opus-20240229"
    secondary_endpoint: str = "https://api.openai.com/v1/chat/completions"
    secondary_model: str = "gpt-4-turbo-preview"

    # Slot used for new requests until switched
    active_provider: str = "primary"

    # Outbound call timeout in seconds
    vendor_timeout: float = 120.0

    # Logging
    log_level: str = "info"
    log_path: str = ""  # e.g. /app/logs/crowecode-ai.log

    # Version
    version: str = "4.0"

    class Config:
        env_prefix = ""
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
