from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings

OWNER = "altany"
GITHUB_BASE_URL = "https://api.github.com/"
API_VERSION = "v3"


class Settings(BaseSettings):
    github_client_id: str = Field(default="", alias="GITHUB_CLIENTID")
    github_secret: str = Field(default="", alias="GITHUB_SECRET")
    port: int = Field(default=8080, alias="PORT")
    github_proxy: Optional[str] = Field(default=None, alias="GITHUB_PROXY")
    request_timeout_seconds: float = Field(default=20.0, alias="REQUEST_TIMEOUT_SECONDS")
    cache_max_bytes: int = Field(default=10 * 1024 * 1024, alias="CACHE_MAX_BYTES")
    cache_ttl_seconds: int = Field(default=7200, alias="CACHE_TTL_SECONDS")
    # 0 means every language request is in flight at once
    languages_concurrency: int = Field(default=0, alias="LANGUAGES_CONCURRENCY")
    skip_missing_languages: bool = Field(default=False, alias="SKIP_MISSING_LANGUAGES")
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # ignore unrelated env vars to avoid validation errors


class UpstreamConfig(BaseModel):
    """Everything the GitHub client needs, fixed for the life of the process."""

    model_config = ConfigDict(frozen=True)

    owner: str = OWNER
    base_url: str = GITHUB_BASE_URL
    api_version: str = API_VERSION
    client_id: str = ""
    client_secret: str = ""
    timeout: float = 20.0
    proxy: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    return Settings()


def build_upstream_config(settings: Settings) -> UpstreamConfig:
    return UpstreamConfig(
        client_id=settings.github_client_id,
        client_secret=settings.github_secret,
        timeout=settings.request_timeout_seconds,
        proxy=settings.github_proxy,
    )
