"""Storefront Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "WEPINK Storefront"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8000

    # Storefront REST API
    api_base_url: str = "http://localhost:8787"
    http_timeout: float = 30.0
    user_agent: str = "wepink-storefront/1.0"

    # Local storage (JSON file); empty keeps everything in memory
    storage_path: Optional[str] = "data/local_storage.json"

    # Cart
    default_minimum_order_value: float = 200.0

    # Order tracking
    order_poll_interval: float = 5.0

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        env_prefix = "STOREFRONT_"
        case_sensitive = False

    @property
    def storage_configured(self) -> bool:
        """Check if a storage file is configured"""
        return bool(self.storage_path)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
