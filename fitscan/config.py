"""Configuration management for FitScan."""

from pathlib import Path
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeminiConfig(BaseModel):
    """Image-generation service connection settings."""
    base_url: str = "https://generativelanguage.googleapis.com"
    model: str = "gemini-2.5-flash-image-preview"
    timeout: float = 120.0

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/v1beta/models/{self.model}:generateContent"


class CaptureConfig(BaseModel):
    """Guided body scan settings."""
    countdown_from: int = 3
    tick_interval: float = 1.0  # seconds between countdown ticks
    jpeg_quality: int = 90


class StorageConfig(BaseModel):
    """Profile persistence settings."""
    data_dir: Path = Path("data")
    profile_key: str = "userProfile"


class LoadingConfig(BaseModel):
    """Loading page feedback settings."""
    tip_interval: float = 2.5


class AppConfig(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Sub-configs
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    loading: LoadingConfig = Field(default_factory=LoadingConfig)

    # Loaded from .env
    gemini_api_key: str | None = None
    log_level: str = "INFO"


def load_config() -> AppConfig:
    """Load configuration from environment and defaults."""
    return AppConfig()
