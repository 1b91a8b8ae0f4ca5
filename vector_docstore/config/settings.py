"""Configuration settings for vector-docstore."""

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.config import StoreConfig
from ..models.documents import DEFAULT_DIMENSION, DEFAULT_NAMESPACE


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging Configuration
    DEBUG: bool = Field(default=False, description="Debug mode")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FILE: Optional[Path] = Field(
        default=None, description="Optional file that receives log records"
    )

    # Vector Store Configuration
    VECTOR_STORE_PROVIDER: str = Field(
        default="in-memory", description="Backend: 'remote' or 'in-memory'"
    )
    VECTOR_STORE_URL: Optional[str] = Field(
        default=None, description="Remote vector database REST URL"
    )
    VECTOR_STORE_TOKEN: Optional[str] = Field(
        default=None, description="Remote vector database token"
    )
    VECTOR_STORE_NAMESPACE: str = Field(
        default=DEFAULT_NAMESPACE, description="Default namespace"
    )
    VECTOR_STORE_DEFAULT_DIMENSION: int = Field(
        default=DEFAULT_DIMENSION, description="Dimension assumed for undeclared indexes"
    )
    VECTOR_STORE_TIMEOUT_SECONDS: float = Field(
        default=30.0, description="Total timeout for a remote request"
    )

    def to_store_config(self) -> StoreConfig:
        """Build the configuration value a DocumentStore is constructed from."""
        options: Dict[str, Any] = {
            "namespace": self.VECTOR_STORE_NAMESPACE,
            "default_dimension": self.VECTOR_STORE_DEFAULT_DIMENSION,
        }
        if self.VECTOR_STORE_URL is not None:
            options["url"] = self.VECTOR_STORE_URL
        if self.VECTOR_STORE_TOKEN is not None:
            options["token"] = self.VECTOR_STORE_TOKEN
        options["timeout_seconds"] = self.VECTOR_STORE_TIMEOUT_SECONDS

        from ..utils.validation import validate_store_config

        return validate_store_config(
            {"provider": self.VECTOR_STORE_PROVIDER, "options": options}
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary, masking the token."""
        data = self.model_dump()
        if data.get("VECTOR_STORE_TOKEN"):
            data["VECTOR_STORE_TOKEN"] = "***"
        return data

    def __repr__(self) -> str:
        """String representation of settings."""
        return (
            f"Settings(provider={self.VECTOR_STORE_PROVIDER}, "
            f"namespace={self.VECTOR_STORE_NAMESPACE}, debug={self.DEBUG})"
        )
