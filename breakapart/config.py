"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Shown when the host has no translation for the action label
    action_label_fallback: str = "Break Apart SVG"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "BREAKAPART_"}


settings = Settings()
