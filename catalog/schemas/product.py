"""Product request/response schemas - REST API contract (camelCase on the wire)."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalog.models.product import Product


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductFields(CamelModel):
    """Fields a client may set. Rules are enforced by Product.validation_errors()."""

    name: str | None = None
    description: str | None = None
    category: str | None = None
    brand: str | None = None
    price: float | None = None
    stock: int | None = None
    rating: float | None = None
    tags: list[str] | None = None
    images: list[str] | None = None


class ProductCreate(ProductFields):
    # An explicit id makes create a replace of any existing document with that id
    id: str | None = None


class ProductUpdate(ProductFields):
    """Structured patch: identity and timestamps are not part of it, unknown keys are dropped."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class SearchFilters(CamelModel):
    category: str | None = None
    brand: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    min_rating: float | None = None
    # True filters to stock > 0; False is accepted but adds no constraint
    in_stock: bool | None = None


class TermBucket(BaseModel):
    key: str
    count: int


class RangeBucket(CamelModel):
    key: str
    from_: float | None = Field(default=None, alias="from")
    to: float | None = None
    count: int


class SearchAggregations(CamelModel):
    categories: list[TermBucket] = []
    brands: list[TermBucket] = []
    price_ranges: list[RangeBucket] = []


class ProductPage(CamelModel):
    products: list[Product]
    total: int
    page: int
    size: int
    total_pages: int


class SearchResult(ProductPage):
    aggregations: SearchAggregations


class SearchResponse(SearchResult):
    query: str | None = None
    filters: SearchFilters


class BulkCreateRequest(BaseModel):
    products: list[ProductCreate]


class BulkCreateResponse(BaseModel):
    count: int
    ids: list[str]


class IndexStats(CamelModel):
    index_name: str
    document_count: int
    storage_size: int
    stats: dict[str, Any] | None = None


class IndexDeleted(BaseModel):
    index: str
    acknowledged: bool
