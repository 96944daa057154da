from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    api_base_url: str = Field("http://localhost:3000")
    uploads_base_url: str = Field("http://localhost:3000/uploads")
    placeholder_image: str = Field("/static/img/placeholder.svg")

    page_size: int = Field(5, ge=1)
    search_debounce_seconds: float = Field(0.5, ge=0)
    request_timeout_seconds: float = Field(15.0, gt=0)
    require_image_on_update: bool = True
    session_idle_seconds: int = Field(3600, ge=1)

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
