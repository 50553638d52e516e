"""Application configuration."""
from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    PROJECT_NAME: str = "DocAtlas Tagging API"

    # Database
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "docatlas"
    # Full URL; built from the POSTGRES_* fields when unset
    DATABASE_URL: Optional[str] = None
    SQL_ECHO: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    # OpenAI (optional external classifier)
    OPENAI_API_KEY: str = ""
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_TIMEOUT_SECONDS: float = 10.0
    LLM_MIN_TEXT_LENGTH: int = 50
    LLM_PROMPT_CHARS: int = 2000

    # Classification: "weighted" (ranked top domains) or "threshold" (keyword membership)
    CLASSIFICATION_MODE: str = "weighted"
    MAX_DOMAIN_TAGS: int = 5
    MAX_KEYWORD_TAGS: int = 3
    MAX_LOCAL_TAGS: int = 6

    # Search
    SEARCH_PREVIEW_LENGTH: int = 200

    # CORS
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost"]

    @model_validator(mode="after")
    def assemble_database_url(self) -> "Settings":
        """PostgreSQL database URL for SQLAlchemy."""
        if not self.DATABASE_URL:
            self.DATABASE_URL = f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        return self


settings = Settings()
