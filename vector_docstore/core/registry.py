"""Per-namespace index metadata shared by the backends."""

from typing import Dict, List, Optional, Sequence, Union

from ..config.logging import LoggerMixin
from ..models.documents import IndexSpec, Metric
from ..utils.validation import validate_index_args
from .exceptions import DimensionMismatchError


class IndexRegistry(LoggerMixin):
    """Advisory record of each namespace's dimension and metric.

    Backends auto-create namespaces on first write, so entries are hints: a
    declared entry comes from create_index, an inferred one from the first
    embedding written to a namespace nobody declared.
    """

    def __init__(self, logger=None) -> None:
        self._logger = logger
        self._specs: Dict[str, IndexSpec] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._specs

    def __len__(self) -> int:
        return len(self._specs)

    def names(self) -> List[str]:
        """Registered namespace names, in registration order."""
        return list(self._specs)

    def get(self, name: str) -> Optional[IndexSpec]:
        return self._specs.get(name)

    def register(
        self,
        name: str,
        dimension: int,
        metric: Union[Metric, str] = Metric.COSINE,
    ) -> IndexSpec:
        """Declare a namespace's dimension and metric."""
        name, dimension, metric = validate_index_args(name, dimension, metric)
        spec = IndexSpec(name=name, dimension=dimension, metric=metric, declared=True)
        self._specs[name] = spec
        self.logger.debug(
            "Index registered", namespace=name, dimension=dimension, metric=metric.value
        )
        return spec

    def observe(self, name: str, dimension: int) -> IndexSpec:
        """Record a namespace seen through a write, inferring its dimension."""
        spec = self._specs.get(name)
        if spec is None:
            spec = IndexSpec(name=name, dimension=dimension, declared=False)
            self._specs[name] = spec
            self.logger.debug("Index inferred", namespace=name, dimension=dimension)
        elif spec.dimension is None:
            spec.dimension = dimension
        return spec

    def touch(self, name: str) -> IndexSpec:
        """Record a namespace without any dimension information."""
        spec = self._specs.get(name)
        if spec is None:
            spec = IndexSpec(name=name, declared=False)
            self._specs[name] = spec
        return spec

    def remove(self, name: str) -> bool:
        """Forget a namespace. Returns True if it was registered."""
        return self._specs.pop(name, None) is not None

    def expected_dimension(self, name: str, declared_only: bool = False) -> Optional[int]:
        spec = self._specs.get(name)
        if spec is None or (declared_only and not spec.declared):
            return None
        return spec.dimension

    def check_dimension(
        self,
        name: str,
        embedding: Optional[Sequence[float]],
        declared_only: bool = False,
    ) -> None:
        """Reject an embedding whose length disagrees with the namespace."""
        if embedding is None:
            return
        expected = self.expected_dimension(name, declared_only=declared_only)
        if expected is not None and len(embedding) != expected:
            raise DimensionMismatchError(name, expected, len(embedding))
