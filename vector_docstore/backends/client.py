"""HTTP client for the remote vector database."""

from typing import Any, Dict, List, Optional, Sequence

import aiohttp

from ..config.logging import LoggerMixin


class RemoteRequestError(Exception):
    """Raised when the remote vector database rejects or fails a request."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(message)


class RemoteVectorClient(LoggerMixin):
    """Thin async client over the Upstash Vector REST API.

    Calls are columnar: ids, vectors and metadata travel as parallel lists
    and are zipped into rows on the wire.
    """

    def __init__(
        self,
        url: str,
        token: str,
        timeout_seconds: float = 30.0,
        logger=None,
    ) -> None:
        self._logger = logger
        self.url = url.rstrip("/")
        self._token = token
        self.timeout_seconds = timeout_seconds
        self._session: Optional[aiohttp.ClientSession] = None

    async def initialize(self) -> None:
        """Open the HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self.logger.debug("Remote vector client session opened", url=self.url)

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            await self._session.close()
            self._session = None
            self.logger.debug("Remote vector client session closed", url=self.url)

    @property
    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, payload: Any) -> Any:
        if self._session is None or self._session.closed:
            await self.initialize()

        url = f"{self.url}/{path.lstrip('/')}"
        try:
            async with self._session.request(
                method, url, headers=self._headers, json=payload
            ) as response:
                try:
                    data = await response.json(content_type=None)
                except ValueError:
                    data = None
                if response.status != 200:
                    detail = data.get("error") if isinstance(data, dict) else None
                    if detail is None:
                        detail = await response.text()
                    raise RemoteRequestError(
                        f"{method} {path} failed: {response.status} - {detail}",
                        status=response.status,
                    )
        except aiohttp.ClientError as e:
            raise RemoteRequestError(f"{method} {path} request error: {e}") from e

        if not isinstance(data, dict):
            raise RemoteRequestError(f"{method} {path} returned an unexpected body")
        if data.get("error"):
            raise RemoteRequestError(f"{method} {path} failed: {data['error']}")
        return data.get("result")

    async def upsert(
        self,
        namespace: str,
        ids: Sequence[str],
        vectors: Sequence[Sequence[float]],
        metadata: Sequence[Dict[str, Any]],
    ) -> None:
        """Upsert rows built from three parallel columns."""
        if not (len(ids) == len(vectors) == len(metadata)):
            raise ValueError("ids, vectors and metadata must have the same length")
        rows = [
            {"id": doc_id, "vector": list(vector), "metadata": meta}
            for doc_id, vector, meta in zip(ids, vectors, metadata)
        ]
        await self._request("POST", f"upsert/{namespace}", rows)

    async def query(
        self,
        namespace: str,
        vector: Sequence[float],
        top_k: int,
        filter: Optional[str] = None,
        include_vectors: bool = False,
    ) -> List[Dict[str, Any]]:
        """Return raw hits: dicts with id, score and optional metadata/vector."""
        payload: Dict[str, Any] = {
            "vector": list(vector),
            "topK": top_k,
            "includeMetadata": True,
            "includeVectors": include_vectors,
        }
        if filter:
            payload["filter"] = filter
        result = await self._request("POST", f"query/{namespace}", payload)
        return list(result or [])

    async def update_by_id(
        self,
        namespace: str,
        id: str,
        vector: Optional[Sequence[float]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> int:
        """Patch one vector. Returns the number of vectors updated."""
        payload: Dict[str, Any] = {"id": id}
        if vector is not None:
            payload["vector"] = list(vector)
        if metadata is not None:
            payload["metadata"] = metadata
            payload["metadataUpdateMode"] = "PATCH"
        result = await self._request("POST", f"update/{namespace}", payload)
        return int((result or {}).get("updated", 0))

    async def delete_by_id(self, namespace: str, id: str) -> int:
        """Delete one vector. Returns the number of vectors deleted."""
        result = await self._request("DELETE", f"delete/{namespace}", {"ids": [id]})
        return int((result or {}).get("deleted", 0))
