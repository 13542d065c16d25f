"""
Configuration settings for the Talent Search engine.
"""

from typing import Optional
import os
from pydantic_settings import BaseSettings
from pydantic import Field
from dotenv import load_dotenv


load_dotenv()


class AzureOpenAISettings(BaseSettings):
    """Azure OpenAI configuration used for requirement extraction."""

    api_key: Optional[str] = Field(default=None)
    endpoint: Optional[str] = Field(default=None)
    api_version: str = Field(default="2024-02-01")
    chat_deployment: Optional[str] = Field(default=None)
    request_timeout: float = Field(default=8.0)
    max_retries: int = Field(default=1)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.endpoint and self.chat_deployment)

    class Config:
        env_prefix = "AZURE_OPENAI_"


class RankingSettings(BaseSettings):
    """Candidate ranking configuration."""

    # Empirical cut-offs, not calibrated against labelled data yet
    min_relevance_score: float = Field(default=0.50)
    role_filter_threshold: float = Field(default=0.3)
    max_workers: Optional[int] = Field(default=None)
    parallel_threshold: int = Field(default=500)
    default_per_page: int = Field(default=25)
    tables_path: Optional[str] = Field(default=None)

    @property
    def worker_count(self) -> int:
        return self.max_workers or os.cpu_count() or 1

    class Config:
        env_prefix = "RANKING_"


class ApplicationSettings(BaseSettings):
    """General application configuration."""

    app_name: str = Field(default="Talent Search")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_dir: Optional[str] = Field(default=None)

    class Config:
        env_prefix = "APP_"


class Settings:
    """Main settings class that combines all configurations."""

    def __init__(self):
        self.azure_openai = AzureOpenAISettings()
        self.ranking = RankingSettings()
        self.app = ApplicationSettings()

    @property
    def is_development(self) -> bool:
        return self.app.debug


# Global settings instance
settings = Settings()
