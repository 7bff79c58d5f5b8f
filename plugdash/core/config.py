from __future__ import annotations

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from plugdash.models.smart_plug import DataType, Granularity, Unit


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PLUGDASH_",
        case_sensitive=False,
    )

    env: str = Field(default="development")
    debug: bool = Field(default=False)
    docs_enabled: bool = Field(default=True)
    log_level: str = Field(default="INFO", max_length=16)

    cors_origins: list[str] = Field(default_factory=list)
    trusted_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])

    smart_plug_base_url: AnyHttpUrl = Field(default="http://localhost:3000")
    smart_plug_path: str = Field(default="/api/smart-plug", min_length=1, max_length=256)
    smart_plug_timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)
    smart_plug_user_agent: str = Field(
        default="plugdash/0.1", min_length=3, max_length=256
    )

    refresh_interval_seconds: float = Field(default=3600.0, ge=0.05, le=24 * 3600.0)

    default_data_type: DataType = Field(default="aggregated")
    default_aggregation_type: Granularity = Field(default="hour")
    default_unit: Unit = Field(default="Wh")
    default_viewport_width: int = Field(default=1200, ge=0, le=10_000)
    display_timezone: str | None = Field(default=None, max_length=64)

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


def load_settings() -> Settings:
    settings = Settings()
    if not settings.cors_origins:
        settings.cors_origins = ["http://localhost:3000", "http://localhost:8000"]
    return settings
