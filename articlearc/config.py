from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "fallback-secret-change-in-production"


class Settings(BaseSettings):
    """
    Centralized application settings leveraging environment overrides.
    """

    app_name: str = "ArticleArc API"
    environment: str = Field("development", validation_alias="ENVIRONMENT")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    max_payload_bytes: int = Field(1024 * 1024, ge=1024)  # 1 MB request body limit

    # Persistence
    mongodb_uri: str = Field(
        "mongodb://localhost:27017", validation_alias="MONGODB_URI"
    )
    mongodb_database: str = Field("articlearc", validation_alias="MONGODB_DATABASE")

    # Bearer tokens
    jwt_secret: str = Field(DEFAULT_JWT_SECRET, validation_alias="JWT_SECRET")
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = Field(7 * 24 * 60, ge=1)

    # Summary generation
    llm_provider: str = Field(
        "gemini", description="LLM provider: none, gemini, openai, anthropic, ollama"
    )
    llm_model: Optional[str] = Field(None, description="Model name for LLM provider")
    gemini_api_key: Optional[str] = Field(None, validation_alias="GEMINI_API_KEY")
    openai_api_key: Optional[str] = Field(None, validation_alias="OPENAI_API_KEY")
    anthropic_api_key: Optional[str] = Field(None, validation_alias="ANTHROPIC_API_KEY")
    ollama_base_url: Optional[str] = Field(None, validation_alias="OLLAMA_BASE_URL")
    llm_max_tokens: int = Field(300, ge=50, le=4000)
    summary_timeout_seconds: float = Field(
        15.0, gt=0, description="Upper bound for a single AI summary call"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
