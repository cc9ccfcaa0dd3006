"""
Centralised configuration loaded from environment variables.

All settings live here, never scattered across modules.
pydantic-settings gives us type validation and .env file support.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    wiki_api_url: str = "https://community.fandom.com/api.php"
    user_agent: str = "wikirc-relay/1.0"
    http_timeout_seconds: float = 10.0
    http_max_attempts: int = 3
    http_backoff_initial: float = 1.0
    http_backoff_max: float = 8.0
    log_level: str = "INFO"


# Single shared instance, import this everywhere
settings = Settings()
