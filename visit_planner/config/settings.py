"""
Application-wide settings using pydantic-settings.
All runtime env access in visit_planner/ and api/ should go through this module.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_PATH = PROJECT_ROOT / ".env"

DEFAULT_AZURE_API_VERSION = "2025-01-01-preview"


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    LOG_DIR: str = ""
    LOG_FILE_NAME: str = "app.debug.log"
    LOG_FILE_WHEN: str = "midnight"
    LOG_FILE_INTERVAL: int = 1
    LOG_FILE_BACKUP_COUNT: int = 7
    LOG_FILE_ENCODING: str = "utf-8"
    LOG_FILE_LEVEL: str = "DEBUG"
    LOG_TRUNCATE: int = 600

    # Azure OpenAI completion capability
    ENDPOINT_URL: str = ""
    DEPLOYMENT_NAME: str = ""
    AZURE_OPENAI_API_KEY: str = ""
    AZURE_OPENAI_API_VERSION: str = DEFAULT_AZURE_API_VERSION

    # OpenAI-compatible fallback
    COMPLETION_PROVIDER: str = ""
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = ""

    # Sampling
    SCHEDULE_MAX_TOKENS: int = 2000
    SCHEDULE_TEMPERATURE: float = 0.3

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    STATIC_DIR: str = "."
    INDEX_FILE: str = "index.html"
    MAX_BODY_BYTES: int = 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=ENV_PATH,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    @property
    def deployment(self) -> str:
        return (self.DEPLOYMENT_NAME or "").strip()

    def has_azure_creds(self) -> bool:
        return bool(self.ENDPOINT_URL.strip() and self.AZURE_OPENAI_API_KEY.strip())

    def has_openai_like_creds(self) -> bool:
        return bool(self.OPENAI_API_KEY.strip())


settings = Settings()
