"""
OpenSearch document repository.

Stores documents in a single OpenSearch index and delegates BM25 ranking
to the cluster (BM25 is the default similarity for ``text`` fields).
"""

from typing import Any, Dict, List, Optional

import structlog
from opensearchpy import AsyncOpenSearch
from opensearchpy.exceptions import NotFoundError, OpenSearchException

from ..config import Settings
from ..domain.entities import Document
from ..domain.exceptions import DocumentStoreException, ValidationException
from .document_repository import IDocumentRepository

logger = structlog.get_logger(__name__)

# Default index.max_result_window; from + size beyond it is refused by the cluster
MAX_RESULT_WINDOW = 10000

# Metadata is stored but not indexed so documents with differently typed
# meta values never collide in the mapping.
INDEX_BODY: Dict[str, Any] = {
    "settings": {"index": {"number_of_shards": 1}},
    "mappings": {
        "properties": {
            "content": {"type": "text"},
            "meta": {"type": "object", "enabled": False},
        }
    },
}


def build_client(settings: Settings) -> AsyncOpenSearch:
    """
    Create an async OpenSearch client from settings.

    Args:
        settings: Service settings with OPENSEARCH_* values

    Returns:
        Configured AsyncOpenSearch client
    """
    return AsyncOpenSearch(
        hosts=[{"host": settings.OPENSEARCH_SERVER, "port": settings.OPENSEARCH_SERVER_PORT}],
        http_auth=settings.opensearch_http_auth,
        use_ssl=settings.OPENSEARCH_USE_SSL,
        verify_certs=settings.OPENSEARCH_VERIFY_CERTS,
        ssl_show_warn=False,
        timeout=settings.OPENSEARCH_TIMEOUT,
    )


class OpenSearchDocumentRepository(IDocumentRepository):
    """Document repository backed by an OpenSearch index."""

    backend_name = "opensearch"

    def __init__(self, client: AsyncOpenSearch, index: str = "document") -> None:
        """
        Initialize repository.

        Args:
            client: Async OpenSearch client
            index: Name of the index holding documents
        """
        self.client = client
        self.index = index
        self._index_ready = False

    async def _ensure_index(self) -> None:
        """Create the index on first use."""
        if self._index_ready:
            return

        try:
            if not await self.client.indices.exists(index=self.index):
                await self.client.indices.create(index=self.index, body=INDEX_BODY)
                logger.info("OpenSearch index created", index=self.index)
        except OpenSearchException as e:
            raise DocumentStoreException(self.backend_name, "create_index", str(e)) from e

        self._index_ready = True

    @staticmethod
    def _from_hit(hit: Dict[str, Any], with_score: bool = False) -> Document:
        source = hit.get("_source", {})
        document = Document(
            id=hit["_id"],
            content=source["content"],
            meta=source.get("meta") or {},
        )
        if with_score and hit.get("_score") is not None:
            document = document.with_score(hit["_score"])
        return document

    async def write_documents(self, documents: List[Document]) -> List[Document]:
        if not documents:
            return []

        await self._ensure_index()

        actions: List[Dict[str, Any]] = []
        for document in documents:
            actions.append({"index": {"_index": self.index, "_id": document.id}})
            actions.append({"content": document.content, "meta": document.meta})

        try:
            response = await self.client.bulk(body=actions, refresh="wait_for")
        except OpenSearchException as e:
            raise DocumentStoreException(self.backend_name, "write", str(e)) from e

        if response.get("errors"):
            failed = [
                item["index"]
                for item in response.get("items", [])
                if item.get("index", {}).get("error")
            ]
            reason = f"{len(failed)} of {len(documents)} documents rejected"
            logger.error("Bulk write partially failed", index=self.index, failed=failed[:5])
            raise DocumentStoreException(self.backend_name, "write", reason)

        logger.info("Documents written", backend=self.backend_name, count=len(documents))
        return list(documents)

    async def get_document(self, document_id: str) -> Optional[Document]:
        await self._ensure_index()

        try:
            hit = await self.client.get(index=self.index, id=document_id)
        except NotFoundError:
            return None
        except OpenSearchException as e:
            raise DocumentStoreException(self.backend_name, "get", str(e)) from e

        return self._from_hit(hit)

    async def get_documents(self, limit: int, offset: int = 0) -> List[Document]:
        if offset + limit > MAX_RESULT_WINDOW:
            raise ValidationException(
                "offset",
                offset,
                f"offset + limit cannot exceed {MAX_RESULT_WINDOW} on this backend",
            )

        await self._ensure_index()

        body = {
            "query": {"match_all": {}},
            "from": offset,
            "size": limit,
            "sort": ["_doc"],
        }
        try:
            response = await self.client.search(index=self.index, body=body)
        except OpenSearchException as e:
            raise DocumentStoreException(self.backend_name, "list", str(e)) from e

        return [self._from_hit(hit) for hit in response["hits"]["hits"]]

    async def count_documents(self) -> int:
        await self._ensure_index()

        try:
            response = await self.client.count(index=self.index)
        except OpenSearchException as e:
            raise DocumentStoreException(self.backend_name, "count", str(e)) from e

        return int(response["count"])

    async def delete_document(self, document_id: str) -> bool:
        await self._ensure_index()

        try:
            await self.client.delete(index=self.index, id=document_id, refresh="wait_for")
        except NotFoundError:
            return False
        except OpenSearchException as e:
            raise DocumentStoreException(self.backend_name, "delete", str(e)) from e

        return True

    async def search(self, query: str, top_k: int) -> List[Document]:
        await self._ensure_index()

        body = {
            "query": {"match": {"content": {"query": query}}},
            "size": top_k,
        }
        try:
            response = await self.client.search(index=self.index, body=body)
        except OpenSearchException as e:
            raise DocumentStoreException(self.backend_name, "search", str(e)) from e

        return [self._from_hit(hit, with_score=True) for hit in response["hits"]["hits"]]

    async def health_check(self) -> dict:
        try:
            health = await self.client.cluster.health()
        except OpenSearchException as e:
            logger.error("OpenSearch health check failed", error=str(e))
            return {"status": "unhealthy", "backend": self.backend_name, "error": str(e)}

        cluster_status = health.get("status", "unknown")
        return {
            "status": "unhealthy" if cluster_status == "red" else "healthy",
            "backend": self.backend_name,
            "cluster_status": cluster_status,
            "index": self.index,
        }

    async def close(self) -> None:
        await self.client.close()
