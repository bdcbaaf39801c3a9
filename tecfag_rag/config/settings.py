"""Configuration management for the Tecfag RAG pipeline."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _sanitize_secret(value: str) -> str:
    """Remove BOM characters and whitespace from secrets.

    Secrets pasted from a dashboard or a Windows editor may carry a BOM that
    breaks HTTP headers.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Provider credentials
    gemini_api_key: str = ""
    groq_api_key: str = ""

    @field_validator("gemini_api_key", "groq_api_key", mode="after")
    @classmethod
    def sanitize_secrets(cls, value: str) -> str:
        """Remove BOM and whitespace from secret values."""
        return _sanitize_secret(value)

    # Storage
    data_dir: Path = Path("./data")
    database_path: Path | None = None

    # Embeddings
    embedding_model: str = "gemini-embedding-001"
    embedding_dimensions: int = 768
    embedding_batch_size: int = 10
    embedding_batch_delay: float = 0.1
    embedding_requests_per_minute: int | None = None

    # Completion providers
    llm_model: str = "gemini-2.5-flash"
    fallback_llm_model: str = "llama-3.3-70b-versatile"
    groq_base_url: str = "https://api.groq.com/openai/v1"
    llm_temperature: float = 0.3
    llm_max_tokens: int = 12000
    fallback_max_tokens: int = 4096
    llm_requests_per_minute: int | None = None

    # RAG settings
    chunk_size: int = 800
    chunk_overlap: int = 150
    chunks_per_document: int = 2
    sub_query_timeout: float | None = 30.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def sqlite_path(self) -> Path:
        """SQLite database holding documents and chunks."""
        return self.database_path or self.data_dir / "tecfag_rag.db"

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.sqlite_path.parent.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
