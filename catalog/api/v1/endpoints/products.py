"""
Product endpoints - search, index admin, bulk and RESTful CRUD (GET/POST/PUT/DELETE).
Challenge: Pagination limits, filter parsing, 404 handling.
Design: Thin controller; service layer holds business logic.
"""

from fastapi import APIRouter, Query, Response, status

from catalog.config import get_settings
from catalog.core.dependencies import ProductSvc
from catalog.core.exceptions import ProductNotFoundError
from catalog.models.product import Product
from catalog.schemas.product import (
    BulkCreateRequest,
    BulkCreateResponse,
    IndexDeleted,
    IndexStats,
    ProductCreate,
    ProductPage,
    ProductUpdate,
    SearchFilters,
    SearchResponse,
)

router = APIRouter()
settings = get_settings()


@router.get("/search", response_model=SearchResponse)
async def search_products(
    svc: ProductSvc,
    q: str | None = Query(None, description="Free text over name, description, category, brand"),
    category: str | None = Query(None),
    brand: str | None = Query(None),
    min_price: float | None = Query(None, alias="minPrice", ge=0),
    max_price: float | None = Query(None, alias="maxPrice", ge=0),
    min_rating: float | None = Query(None, alias="minRating", ge=0, le=5),
    in_stock: bool | None = Query(None, alias="inStock"),
    page: int = Query(1, ge=1),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """Full-text and filtered search with category, brand and price-range aggregations."""
    filters = SearchFilters(
        category=category or None,
        brand=brand or None,
        min_price=min_price,
        max_price=max_price,
        min_rating=min_rating,
        in_stock=in_stock,
    )
    result = await svc.search(q, filters, page=page, size=size)
    return SearchResponse(**dict(result), query=q, filters=filters)


@router.get("/stats", response_model=IndexStats)
async def index_stats(svc: ProductSvc):
    """Document count and storage size of the products index."""
    return await svc.index_stats()


@router.delete("/index", response_model=IndexDeleted)
async def delete_index(svc: ProductSvc):
    """Drop the whole products index. It is recreated on next startup."""
    return await svc.delete_index()


@router.post("/bulk", response_model=BulkCreateResponse, status_code=status.HTTP_201_CREATED)
async def bulk_create(svc: ProductSvc, data: BulkCreateRequest):
    """Validate every product, then index them in one batch. Any failure fails the batch."""
    products = await svc.bulk_create(data.products)
    return BulkCreateResponse(count=len(products), ids=[p.id for p in products])


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
async def create_product(svc: ProductSvc, data: ProductCreate):
    """Create a product. With an explicit id an existing product is replaced."""
    return await svc.create(data)


@router.get("", response_model=ProductPage)
async def list_products(
    svc: ProductSvc,
    page: int = Query(1, ge=1),
    size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """List products newest first. REST: GET /products?page=1&size=10."""
    return await svc.list_products(page=page, size=size)


@router.get("/{product_id}", response_model=Product)
async def get_product(svc: ProductSvc, product_id: str):
    product = await svc.get_by_id(product_id)
    if not product:
        raise ProductNotFoundError(product_id)
    return product


@router.put("/{product_id}", response_model=Product)
async def update_product(svc: ProductSvc, product_id: str, data: ProductUpdate):
    """Merge the given fields over the stored product and re-index it."""
    product = await svc.update(product_id, data)
    if not product:
        raise ProductNotFoundError(product_id)
    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(svc: ProductSvc, product_id: str):
    ok = await svc.delete(product_id)
    if not ok:
        raise ProductNotFoundError(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
