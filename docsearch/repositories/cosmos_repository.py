"""
Azure Cosmos DB document repository.

Documents are stored as items in a single container partitioned by id.
Cosmos DB has no BM25 ranking, so keyword search narrows candidates with
CONTAINS filters server-side and ranks them locally.
"""

from typing import Any, Dict, List, Optional

import structlog
from azure.cosmos import PartitionKey
from azure.cosmos.aio import ContainerProxy, CosmosClient
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError

from ..domain.entities import Document
from ..domain.exceptions import DocumentStoreException
from ..search.bm25 import rank_documents, tokenize
from .document_repository import IDocumentRepository

logger = structlog.get_logger(__name__)

# Upper bounds keeping the candidate query cheap
MAX_QUERY_TERMS = 16
DEFAULT_CANDIDATE_LIMIT = 1000


class CosmosDocumentRepository(IDocumentRepository):
    """Document repository backed by a Cosmos DB SQL API container."""

    backend_name = "cosmos"

    def __init__(
        self,
        client: CosmosClient,
        database_name: str = "docsearch",
        container_name: str = "documents",
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
    ) -> None:
        """
        Initialize repository.

        Args:
            client: Async Cosmos client
            database_name: Database holding the container
            container_name: Container holding documents
            candidate_limit: Maximum items fetched per keyword search
        """
        self.client = client
        self.database_name = database_name
        self.container_name = container_name
        self.candidate_limit = candidate_limit
        self._container: Optional[ContainerProxy] = None

    @classmethod
    def from_connection_string(
        cls, connection_string: str, database_name: str, container_name: str
    ) -> "CosmosDocumentRepository":
        client = CosmosClient.from_connection_string(connection_string)
        return cls(client, database_name=database_name, container_name=container_name)

    async def _get_container(self) -> ContainerProxy:
        """Create database and container on first use."""
        if self._container is not None:
            return self._container

        try:
            database = await self.client.create_database_if_not_exists(id=self.database_name)
            self._container = await database.create_container_if_not_exists(
                id=self.container_name,
                partition_key=PartitionKey(path="/id"),
            )
        except CosmosHttpResponseError as e:
            raise DocumentStoreException(self.backend_name, "create_container", str(e)) from e

        logger.info(
            "Cosmos container ready",
            database=self.database_name,
            container=self.container_name,
        )
        return self._container

    @staticmethod
    def _from_item(item: Dict[str, Any]) -> Document:
        return Document(id=item["id"], content=item["content"], meta=item.get("meta") or {})

    async def _query(self, query: str, parameters: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        container = await self._get_container()
        return [item async for item in container.query_items(query=query, parameters=parameters)]

    async def write_documents(self, documents: List[Document]) -> List[Document]:
        container = await self._get_container()

        try:
            for document in documents:
                await container.upsert_item(
                    {"id": document.id, "content": document.content, "meta": document.meta}
                )
        except CosmosHttpResponseError as e:
            raise DocumentStoreException(self.backend_name, "write", str(e)) from e

        logger.info("Documents written", backend=self.backend_name, count=len(documents))
        return list(documents)

    async def get_document(self, document_id: str) -> Optional[Document]:
        container = await self._get_container()

        try:
            item = await container.read_item(item=document_id, partition_key=document_id)
        except CosmosResourceNotFoundError:
            return None
        except CosmosHttpResponseError as e:
            raise DocumentStoreException(self.backend_name, "get", str(e)) from e

        return self._from_item(item)

    async def get_documents(self, limit: int, offset: int = 0) -> List[Document]:
        try:
            items = await self._query(
                "SELECT * FROM c ORDER BY c.id OFFSET @offset LIMIT @limit",
                [{"name": "@offset", "value": offset}, {"name": "@limit", "value": limit}],
            )
        except CosmosHttpResponseError as e:
            raise DocumentStoreException(self.backend_name, "list", str(e)) from e

        return [self._from_item(item) for item in items]

    async def count_documents(self) -> int:
        try:
            result = await self._query("SELECT VALUE COUNT(1) FROM c", [])
        except CosmosHttpResponseError as e:
            raise DocumentStoreException(self.backend_name, "count", str(e)) from e

        return int(result[0]) if result else 0

    async def delete_document(self, document_id: str) -> bool:
        container = await self._get_container()

        try:
            await container.delete_item(item=document_id, partition_key=document_id)
        except CosmosResourceNotFoundError:
            return False
        except CosmosHttpResponseError as e:
            raise DocumentStoreException(self.backend_name, "delete", str(e)) from e

        return True

    async def search(self, query: str, top_k: int) -> List[Document]:
        terms = list(dict.fromkeys(tokenize(query)))[:MAX_QUERY_TERMS]
        if not terms:
            return []

        conditions = " OR ".join(f"CONTAINS(c.content, @t{i}, true)" for i in range(len(terms)))
        parameters = [{"name": f"@t{i}", "value": term} for i, term in enumerate(terms)]
        sql = f"SELECT TOP {int(self.candidate_limit)} * FROM c WHERE {conditions}"

        try:
            items = await self._query(sql, parameters)
        except CosmosHttpResponseError as e:
            raise DocumentStoreException(self.backend_name, "search", str(e)) from e

        candidates = [self._from_item(item) for item in items]
        logger.debug("Search candidates fetched", count=len(candidates), terms=terms)
        return rank_documents(query, candidates, top_k)

    async def health_check(self) -> dict:
        try:
            container = await self._get_container()
            await container.read()
        except (CosmosHttpResponseError, DocumentStoreException) as e:
            logger.error("Cosmos health check failed", error=str(e))
            return {"status": "unhealthy", "backend": self.backend_name, "error": str(e)}

        return {
            "status": "healthy",
            "backend": self.backend_name,
            "database": self.database_name,
            "container": self.container_name,
        }

    async def close(self) -> None:
        await self.client.close()
