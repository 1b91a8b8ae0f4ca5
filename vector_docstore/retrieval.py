"""Text-level retrieval on top of a DocumentStore."""

import uuid
from collections.abc import Mapping, Sequence
from typing import Any, Dict, List, Optional, Protocol, Union

from .config.logging import LoggerMixin
from .core.exceptions import ValidationError
from .core.store import DocumentStore
from .models.documents import QueryOptions, QueryResult
from .models.results import BatchResult
from .utils.validation import validate_query_options


class Embedder(Protocol):
    """Anything that turns text into an embedding vector."""

    async def embed(self, text: str) -> List[float]:
        ...


class DocumentRetriever(LoggerMixin):
    """Embeds texts and queries so callers can work with plain strings."""

    def __init__(self, store: DocumentStore, embedder: Embedder, logger=None) -> None:
        self._logger = logger
        self.store = store
        self.embedder = embedder

    async def _embed(self, text: str, what: str) -> List[float]:
        embedding = await self.embedder.embed(text)
        if not embedding:
            raise ValidationError(f"Embedder returned an empty embedding for the {what}", what)
        return list(embedding)

    async def add_texts(
        self,
        texts: Sequence[str],
        metadatas: Optional[Sequence[Optional[Dict[str, Any]]]] = None,
        ids: Optional[Sequence[str]] = None,
        namespace: Optional[str] = None,
    ) -> BatchResult:
        """Embed and upsert texts. Ids default to random UUIDs."""
        if isinstance(texts, str):
            raise ValidationError("texts must be a list of strings", "texts")
        if metadatas is not None and len(metadatas) != len(texts):
            raise ValidationError("metadatas must have one entry per text", "metadatas")
        if ids is not None and len(ids) != len(texts):
            raise ValidationError("ids must have one entry per text", "ids")
        if not texts:
            return BatchResult(count=0)

        documents = []
        for position, text in enumerate(texts):
            documents.append(
                {
                    "id": ids[position] if ids is not None else str(uuid.uuid4()),
                    "text": text,
                    "metadata": dict(metadatas[position] or {}) if metadatas is not None else {},
                    "embedding": await self._embed(text, "text"),
                }
            )

        result = await self.store.upsert(documents, namespace=namespace)
        self.logger.info(
            "Texts added", count=result.count, failed=len(result.failures), namespace=namespace
        )
        return result

    async def search(
        self,
        query_text: str,
        options: Union[QueryOptions, Mapping, None] = None,
    ) -> List[QueryResult]:
        """Embed ``query_text`` and return the most similar documents."""
        options = validate_query_options(options)
        query_embedding = await self._embed(query_text, "query")
        self.logger.debug(
            "Searching documents", query=query_text[:100], dimension=len(query_embedding)
        )
        return await self.store.query(query_embedding, options)

    async def get_relevant_context(
        self,
        query_text: str,
        max_documents: int = 5,
        max_context_length: int = 2000,
        namespace: Optional[str] = None,
    ) -> str:
        """Join the texts of the best matches within ``max_context_length`` characters.

        A match that does not fit is truncated when more than 100 characters
        of budget remain, otherwise assembly stops.
        """
        results = await self.search(
            query_text, {"top_k": max_documents, "namespace": namespace}
        )
        if not results:
            self.logger.debug("No relevant documents found", query=query_text[:100])
            return ""

        context_parts: List[str] = []
        total_length = 0
        for result in results:
            content = result.text
            if not content:
                continue
            separator = len("\n\n") if context_parts else 0

            if total_length + separator + len(content) > max_context_length:
                remaining_space = max_context_length - total_length - separator
                if remaining_space > 100:
                    context_parts.append(content[:remaining_space - 3] + "...")
                break

            context_parts.append(content)
            total_length += separator + len(content)

        context = "\n\n".join(context_parts)
        self.logger.info(
            "Context generated",
            query=query_text[:50] + "..." if len(query_text) > 50 else query_text,
            context_length=len(context),
            documents_used=len(context_parts),
        )
        return context
