"""Store configuration models for vector-docstore."""

from enum import Enum
from typing import Any, Dict

from pydantic import ConfigDict, Field, field_validator

from .base import DocStoreBaseModel
from .documents import DEFAULT_DIMENSION, DEFAULT_NAMESPACE


class Provider(str, Enum):
    """Backends a DocumentStore can be constructed with."""

    REMOTE = "remote"
    IN_MEMORY = "in-memory"

    @classmethod
    def _missing_(cls, value: object):
        aliases = {
            "upstash": cls.REMOTE,
            "local": cls.IN_MEMORY,
            "memory": cls.IN_MEMORY,
            "in_memory": cls.IN_MEMORY,
        }
        if isinstance(value, str):
            return aliases.get(value.strip().lower())
        return None


class StoreConfig(DocStoreBaseModel):
    """Value supplied by the configuration loader at construction time."""

    provider: Provider = Field(description="Backend to construct")
    options: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific options"
    )

    @field_validator('provider', mode='before')
    @classmethod
    def provider_alias(cls, v: Any) -> Any:
        if isinstance(v, str) and not isinstance(v, Provider):
            try:
                return Provider(v)
            except ValueError:
                raise ValueError(
                    f"Unsupported vector store provider: {v!r} "
                    f"(expected one of: {', '.join(p.value for p in Provider)})"
                )
        return v

    @field_validator('options', mode='before')
    @classmethod
    def options_default(cls, v: Any) -> Any:
        return {} if v is None else v


class InMemoryStoreOptions(DocStoreBaseModel):
    """Options understood by the in-memory backend."""

    model_config = ConfigDict(extra='ignore')

    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1)
    default_dimension: int = Field(default=DEFAULT_DIMENSION, ge=1)


class RemoteStoreOptions(DocStoreBaseModel):
    """Options understood by the remote backend."""

    model_config = ConfigDict(extra='ignore')

    url: str = Field(min_length=1, description="REST endpoint of the vector database")
    token: str = Field(min_length=1, description="Bearer token")
    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1)
    default_dimension: int = Field(
        default=DEFAULT_DIMENSION,
        ge=1,
        description="Dimension assumed when probing an index"
    )
    timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator('url')
    @classmethod
    def url_is_http(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError('url must start with http:// or https://')
        return v.rstrip("/")
