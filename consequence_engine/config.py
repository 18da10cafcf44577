"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Upstream Services
    account_store_base: str = "http://localhost:8001"

    # Service
    service_name: str = "consequence-engine"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Analysis
    analysis_timeout_seconds: float = 2.0  # Caller-side deadline around one pipeline run


settings = Settings()
