from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "WMS Platform"
    environment: str = "development"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    secret_key: str = "change-this-secret-key"
    access_token_expire_minutes: int = 60

    database_url: str = "postgresql+psycopg2://wms:wms@db:5432/wms"
    cors_origins: str = "http://localhost:5173"

    default_stock_status_name: str = "Good"
    low_stock_threshold: int = 10
    default_item_volume_m3: float = 0.01

    api_base_url: str = "http://localhost:8000/api"
    client_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
