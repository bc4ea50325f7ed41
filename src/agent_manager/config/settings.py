"""Application settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from agent_manager.storage.models import PlatformConfig, PlatformType

PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "agent-manager"
    app_env: str = "dev"
    auto_approve: bool = False
    # JSON list in the environment, e.g. '[{"platform": "GITHUB", "enabled": false}]'.
    platforms: list[PlatformConfig] = Field(default_factory=list)
    default_platform: PlatformType = PlatformType.CLAUDE
    max_instruction_chars: int = Field(default=1000, ge=1)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="AGENT_MANAGER_",
        extra="ignore",
        env_file=(PROJECT_ROOT / ".env", PROJECT_ROOT / ".env.local"),
        env_file_encoding="utf-8",
    )

    def platform_config(self, platform: PlatformType) -> PlatformConfig | None:
        return next((item for item in self.platforms if item.platform == platform), None)

    def is_platform_enabled(self, platform: PlatformType) -> bool:
        config = self.platform_config(platform)
        return config is None or config.enabled


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
