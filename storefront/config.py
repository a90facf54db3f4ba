"""Application configuration using Pydantic settings."""

import os
from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Load .env file into os.environ so API_KEY_* / API_PERMISSIONS_* vars are accessible
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./storefront.db"

    # Cache store
    redis_url: str = "redis://localhost:6379/0"
    redis_socket_timeout: float = 1.0
    category_tree_cache_key: str = "category_tree"
    category_tree_cache_ttl: int = 3600  # 1 hour

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    # Server
    log_level: str = "INFO"
    debug: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars like API_KEY_*

    def get_api_keys(self) -> dict[str, str]:
        """Get all API keys from environment variables.

        Returns a dict mapping API key to username.
        Environment variables should be in format: API_KEY_{USERNAME}=key
        """
        api_keys = {}
        for key, value in os.environ.items():
            if key.startswith("API_KEY_"):
                username = key[8:].lower()  # Remove "API_KEY_" prefix
                api_keys[value] = username
        return api_keys

    def get_api_permissions(self, username: str) -> set[str]:
        """Get the permission set granted to a username.

        Environment variables should be in format:
        API_PERMISSIONS_{USERNAME}=read:categories,create:categories
        """
        raw = os.environ.get(f"API_PERMISSIONS_{username.upper()}", "")
        return {perm.strip() for perm in raw.split(",") if perm.strip()}


settings = Settings()
