"""
Configuration management for the storefront client
"""


import threading

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # REST API
    api_base_url: str = Field("http://localhost:5000/api/v1")
    request_timeout: float = Field(15.0, gt=0)

    # Persistent client storage
    storage_path: str = Field("data/storefront_storage.json")
    cart_storage_key: str = Field("cart")
    user_id_storage_key: str = Field("userId")
    token_storage_key: str = Field("token")
    temp_token_storage_key: str = Field("tempToken")

    # Admin order cache
    orders_cache_ttl: int = Field(180, ge=0)

    # Application settings
    log_level: str = Field("INFO")
    log_dir: str = Field("logs")
    environment: str = Field("development")


_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_config() -> Settings:
    """Get the global settings instance, ensuring thread safety."""
    global _settings_instance
    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                _settings_instance = Settings()
    return _settings_instance


def reset_config() -> None:
    """Drop the cached settings so the next get_config() re-reads the environment"""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None
