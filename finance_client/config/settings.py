"""
Configuration management for the finance client.
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FinanceClientConfig(BaseSettings):
    """Configuration settings for the finance client."""

    # Backend API Configuration
    api_base_url: str = Field(
        default="http://localhost:5000/api", alias="API_BASE_URL"
    )
    api_token: Optional[str] = Field(default=None, alias="API_TOKEN")
    api_timeout: float = Field(default=30.0, alias="API_TIMEOUT")

    # Response Cache Configuration
    enable_response_cache: bool = Field(default=True, alias="ENABLE_RESPONSE_CACHE")
    cache_ttl_seconds: float = Field(default=300.0, alias="CACHE_TTL_SECONDS")

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Processing Configuration
    max_concurrent_requests: int = Field(default=4, alias="MAX_CONCURRENT_REQUESTS")
    export_dir: str = Field(default="exports", alias="EXPORT_DIR")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v):
        """Ensure the API base URL is an absolute HTTP(S) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("API base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("api_timeout", "cache_ttl_seconds")
    @classmethod
    def validate_positive_seconds(cls, v, info):
        """Ensure durations are positive."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be greater than 0")
        return v

    @field_validator("max_concurrent_requests")
    @classmethod
    def validate_max_concurrent_requests(cls, v):
        """Ensure at least one request can run."""
        if v < 1:
            raise ValueError("max_concurrent_requests must be at least 1")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()

    def get_request_headers(self) -> dict:
        """Get default HTTP headers for backend requests."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers


def load_config(env_file: Optional[str] = None) -> FinanceClientConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return FinanceClientConfig()


# Global configuration instance
_config: Optional[FinanceClientConfig] = None


def get_config() -> FinanceClientConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> FinanceClientConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
