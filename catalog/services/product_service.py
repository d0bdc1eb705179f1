"""
Product service - business logic for products (SOLID: Single Responsibility).
Challenge: Validate untrusted input, keep identity stable, shape search results.
Design: Service depends on a repository passed in; easy to test with a fake client.
"""

import logging
from typing import Any

from catalog.core.exceptions import BadRequestError, BulkIndexError, ProductValidationError
from catalog.core.metrics import PRODUCTS_INDEXED, SEARCHES
from catalog.models.product import Product, utcnow
from catalog.repositories.product_repository import ProductRepository
from catalog.schemas.product import (
    IndexDeleted,
    IndexStats,
    ProductCreate,
    ProductPage,
    ProductUpdate,
    SearchFilters,
    SearchResult,
)
from catalog.search import query_builder

logger = logging.getLogger(__name__)

DEFAULT_MAX_BULK_SIZE = 1000


def _product_from_input(data: ProductCreate) -> Product:
    """Build a Product from request data; unset fields fall back to model defaults."""
    fields = data.model_dump(exclude_none=True)
    # A blank id counts as absent and gets a generated one
    if not (fields.get("id") or "").strip():
        fields.pop("id", None)
    return Product(**fields)


def _bulk_failures(body: dict[str, Any]) -> list[dict[str, Any]]:
    failures = []
    for item in body.get("items", []):
        result = item.get("index", {})
        error = result.get("error")
        if error:
            reason = error.get("reason") if isinstance(error, dict) else str(error)
            failures.append({"id": result.get("_id"), "error": reason})
    return failures


class ProductService:
    """Handles all product use cases: CRUD, search, bulk indexing, index admin."""

    def __init__(self, repo: ProductRepository, max_bulk_size: int = DEFAULT_MAX_BULK_SIZE):
        self.repo = repo
        self.max_bulk_size = max_bulk_size

    async def create(self, data: ProductCreate) -> Product:
        """Validate, assign identity if absent, index. Re-using an id replaces that document."""
        product = _product_from_input(data)
        errors = product.validation_errors()
        if errors:
            raise ProductValidationError(errors)
        await self.repo.save(product.id, product.to_document())
        PRODUCTS_INDEXED.labels(operation="create").inc()
        logger.info("Product indexed: %s", product.id)
        return product

    async def get_by_id(self, product_id: str) -> Product | None:
        hit = await self.repo.get(product_id)
        if hit is None:
            return None
        return Product.from_document(hit)

    async def list_products(self, page: int = 1, size: int = 10) -> ProductPage:
        """Newest products first."""
        body = await self.repo.search(**query_builder.build_list_request(page, size))
        SEARCHES.labels(kind="list").inc()
        products, total, _ = query_builder.parse_search_response(body)
        return ProductPage(
            products=products,
            total=total,
            page=page,
            size=size,
            total_pages=query_builder.total_pages(total, size),
        )

    async def search(
        self,
        text: str | None,
        filters: SearchFilters | None = None,
        page: int = 1,
        size: int = 10,
    ) -> SearchResult:
        """Full-text + filtered search with category, brand and price aggregations."""
        request = query_builder.build_search_request(text, filters, page, size)
        body = await self.repo.search(**request)
        SEARCHES.labels(kind="search").inc()
        products, total, aggregations = query_builder.parse_search_response(body)
        if total == 0:
            logger.info("search: query=%r filters=%s returned 0 hits", text, filters)
        return SearchResult(
            products=products,
            total=total,
            page=page,
            size=size,
            total_pages=query_builder.total_pages(total, size),
            aggregations=aggregations,
        )

    async def update(self, product_id: str, data: ProductUpdate) -> Product | None:
        """Merge the patch over the stored product, re-validate, replace the document."""
        existing = await self.get_by_id(product_id)
        if existing is None:
            return None
        changes = data.model_dump(exclude_unset=True)
        # Explicit nulls reset optional fields to their empty values
        for field, empty in (("rating", 0.0), ("tags", []), ("images", [])):
            if field in changes and changes[field] is None:
                changes[field] = empty
        # id and created_at always come from the stored record
        product = Product.model_validate(
            {**existing.model_dump(), **changes, "updated_at": utcnow()}
        )
        errors = product.validation_errors()
        if errors:
            raise ProductValidationError(errors, product_id=product_id)
        await self.repo.save(product_id, product.to_document())
        PRODUCTS_INDEXED.labels(operation="update").inc()
        logger.info("Product updated: %s", product_id)
        return product

    async def delete(self, product_id: str) -> bool:
        deleted = await self.repo.delete(product_id)
        if deleted:
            logger.info("Product deleted: %s", product_id)
        return deleted

    async def bulk_create(self, items: list[ProductCreate]) -> list[Product]:
        """All-or-nothing from the caller's view: any invalid or rejected item fails the batch."""
        if not items:
            raise BadRequestError("Products array is required and must not be empty")
        if len(items) > self.max_bulk_size:
            raise BadRequestError(
                f"Cannot bulk index more than {self.max_bulk_size} products at once"
            )
        products = []
        for data in items:
            product = _product_from_input(data)
            errors = product.validation_errors()
            if errors:
                raise ProductValidationError(errors, product_id=product.id)
            products.append(product)
        body = await self.repo.bulk_save([(p.id, p.to_document()) for p in products])
        if body.get("errors"):
            failures = _bulk_failures(body)
            logger.error("Bulk indexing rejected %d of %d products", len(failures), len(products))
            raise BulkIndexError(failures)
        PRODUCTS_INDEXED.labels(operation="bulk").inc(len(products))
        logger.info("Bulk indexed %d products", len(products))
        return products

    async def index_stats(self) -> IndexStats:
        body = await self.repo.stats()
        stats = body.get("indices", {}).get(self.repo.index) or {}
        total = stats.get("total", {})
        return IndexStats(
            index_name=self.repo.index,
            document_count=total.get("docs", {}).get("count", 0),
            storage_size=total.get("store", {}).get("size_in_bytes", 0),
            stats=stats or None,
        )

    async def delete_index(self) -> IndexDeleted:
        body = await self.repo.delete_index()
        logger.warning("Index %r deleted", self.repo.index)
        return IndexDeleted(index=self.repo.index, acknowledged=bool(body.get("acknowledged")))
