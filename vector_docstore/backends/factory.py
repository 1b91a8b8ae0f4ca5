"""Backend selection from a store configuration."""

from typing import Optional

from ..core.exceptions import InitializationError, ValidationError
from ..core.registry import IndexRegistry
from ..models.config import InMemoryStoreOptions, Provider, StoreConfig
from ..utils.validation import validate_model
from .base import VectorBackend
from .memory import InMemoryBackend
from .remote import RemoteBackendAdapter


def create_backend(
    config: StoreConfig,
    registry: Optional[IndexRegistry] = None,
    logger=None,
) -> VectorBackend:
    """Construct the backend named by ``config.provider``."""
    if config.provider == Provider.REMOTE:
        return RemoteBackendAdapter(config.options, registry=registry, logger=logger)

    if config.provider == Provider.IN_MEMORY:
        try:
            options = validate_model(
                InMemoryStoreOptions, config.options, "in-memory store options"
            )
        except ValidationError as e:
            raise InitializationError(
                f"In-memory vector store misconfigured: {e.message}",
                provider=config.provider.value,
                cause=e,
            ) from e
        return InMemoryBackend(
            namespace=options.namespace,
            default_dimension=options.default_dimension,
            registry=registry,
            logger=logger,
        )

    raise ValidationError(f"Unsupported vector store provider: {config.provider}", "provider")
