"""Configuration management using Pydantic Settings"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "payoff-planner"
    log_level: str = "INFO"

    # Simulation
    simulation_horizon_months: int = 360

    # Advisory text generation
    advisory_enabled: bool = True
    advisory_api_url: str = "http://localhost:8003/generate"
    advisory_api_key: Optional[str] = None
    advisory_model: str = "default"
    advisory_timeout_seconds: float = 10.0

    # HTTP Client
    http_timeout_seconds: float = 5.0
    advisory_max_retries: int = 1
    advisory_backoff_base: float = 0.5  # Seconds before the single retry


settings = Settings()
