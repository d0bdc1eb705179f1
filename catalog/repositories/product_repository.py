"""
Product repository - all calls to the search service for the products index.
Challenge: Keep the ES client API in one place; not-found becomes a value, other errors propagate.
"""

import logging
from typing import Any

from elasticsearch import AsyncElasticsearch

logger = logging.getLogger(__name__)


def _body(response: Any) -> Any:
    # Response may be ObjectApiResponse; support both .body and dict access
    return getattr(response, "body", response)


class ProductRepository:
    """Document operations on one index. The client is owned by the caller."""

    def __init__(self, es: AsyncElasticsearch, index: str, refresh: str = "false"):
        self.es = es
        self.index = index
        self.refresh = refresh

    async def save(self, doc_id: str, document: dict[str, Any]) -> dict[str, Any]:
        """Index or fully replace a document."""
        response = await self.es.index(
            index=self.index, id=doc_id, document=document, refresh=self.refresh
        )
        return _body(response)

    async def get(self, doc_id: str) -> dict[str, Any] | None:
        """Fetch a raw hit (`_id`, `_source`). None when the document or index is missing."""
        response = await self.es.options(ignore_status=404).get(index=self.index, id=doc_id)
        body = _body(response)
        if not body.get("found"):
            return None
        return body

    async def delete(self, doc_id: str) -> bool:
        """Remove a document. False when there was nothing to delete."""
        response = await self.es.options(ignore_status=404).delete(
            index=self.index, id=doc_id, refresh=self.refresh
        )
        return _body(response).get("result") == "deleted"

    async def search(self, **request: Any) -> dict[str, Any]:
        """Run a request built by catalog.search.query_builder."""
        response = await self.es.search(index=self.index, **request)
        return _body(response)

    async def bulk_save(self, documents: list[tuple[str, dict[str, Any]]]) -> dict[str, Any]:
        """One batched write of (id, document) pairs."""
        operations: list[dict[str, Any]] = []
        for doc_id, document in documents:
            operations.append({"index": {"_index": self.index, "_id": doc_id}})
            operations.append(document)
        response = await self.es.bulk(operations=operations, refresh=self.refresh)
        return _body(response)

    async def stats(self) -> dict[str, Any]:
        response = await self.es.indices.stats(index=self.index)
        return _body(response)

    async def delete_index(self) -> dict[str, Any]:
        response = await self.es.indices.delete(index=self.index)
        return _body(response)
