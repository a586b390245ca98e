"""Settings loaded from the environment (prefix ``VIEW_PIPELINE_``)."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VIEW_PIPELINE_",
        env_file=".env",
        extra="ignore",
    )

    # App
    app_name: str = "fastapi-view-pipeline"
    debug: bool = False
    dev: bool = False  # load templates from templates_dir instead of package data

    # Session cookie
    session_cookie_name: str = "session"
    session_max_age: int = 3600  # seconds
    session_cookie_secure: bool = True

    # Authentication gate
    login_path: str = "/login"
    default_return_path: str = "/admin"

    # Localization
    default_locale: str = "en"

    # Views
    templates_dir: Path | None = None

    # Demo credentials
    demo_email: str = "xun@yaitoo.cn"
    demo_password: str = "123"


@lru_cache
def get_settings() -> Settings:
    return Settings()
