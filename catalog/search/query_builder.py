"""
Search request construction and response reshaping for the products index.

Everything here is a pure function of its arguments: no client, no settings,
no I/O. The service layer passes the returned keyword arguments straight to
``AsyncElasticsearch.search`` and feeds the response body back through
``parse_search_response``.
"""

import copy
import math
from typing import Any

from catalog.models.product import Product
from catalog.schemas.product import RangeBucket, SearchAggregations, SearchFilters, TermBucket

# name weighs most, then description; category/brand text sub-fields keep the default boost
TEXT_SEARCH_FIELDS = ["name^3", "description^2", "category.text", "brand.text"]

PRICE_RANGES = [
    {"key": "0-50", "from": 0, "to": 50},
    {"key": "50-100", "from": 50, "to": 100},
    {"key": "100-200", "from": 100, "to": 200},
    {"key": "200+", "from": 200},
]

# Relevance first, newest first among equal scores
SEARCH_SORT = [
    {"_score": {"order": "desc"}},
    {"createdAt": {"order": "desc"}},
]

LIST_SORT = [{"createdAt": {"order": "desc"}}]


def page_offset(page: int, size: int) -> int:
    """Zero-based offset of the first hit on a 1-based page."""
    return (page - 1) * size


def total_pages(total: int, size: int) -> int:
    return math.ceil(total / size) if size else 0


def build_filter_clauses(filters: SearchFilters | None) -> list[dict[str, Any]]:
    """One clause per set filter; the engine ANDs them inside bool.filter."""
    if filters is None:
        return []
    clauses: list[dict[str, Any]] = []
    if filters.category:
        clauses.append({"term": {"category": filters.category}})
    if filters.brand:
        clauses.append({"term": {"brand": filters.brand}})
    if filters.min_price is not None or filters.max_price is not None:
        price: dict[str, float] = {}
        if filters.min_price is not None:
            price["gte"] = filters.min_price
        if filters.max_price is not None:
            price["lte"] = filters.max_price
        clauses.append({"range": {"price": price}})
    if filters.min_rating is not None:
        clauses.append({"range": {"rating": {"gte": filters.min_rating}}})
    # in_stock=False is deliberately not translated into a stock == 0 filter
    if filters.in_stock:
        clauses.append({"range": {"stock": {"gt": 0}}})
    return clauses


def build_search_query(text: str | None, filters: SearchFilters | None = None) -> dict[str, Any]:
    """Boosted fuzzy multi-field match AND filters, or match_all when nothing is set."""
    must: list[dict[str, Any]] = []
    if text and text.strip():
        must.append(
            {
                "multi_match": {
                    "query": text,
                    "fields": list(TEXT_SEARCH_FIELDS),
                    "type": "best_fields",
                    "fuzziness": "AUTO",
                }
            }
        )
    clauses = build_filter_clauses(filters)
    if not must and not clauses:
        return {"match_all": {}}
    query: dict[str, Any] = {}
    if must:
        query["must"] = must
    if clauses:
        query["filter"] = clauses
    return {"bool": query}


def build_aggregations() -> dict[str, Any]:
    return {
        "categories": {"terms": {"field": "category"}},
        "brands": {"terms": {"field": "brand"}},
        "price_ranges": {
            "range": {
                "field": "price",
                "ranges": copy.deepcopy(PRICE_RANGES),
            }
        },
    }


def build_search_request(
    text: str | None,
    filters: SearchFilters | None,
    page: int,
    size: int,
) -> dict[str, Any]:
    """Keyword arguments for AsyncElasticsearch.search (minus the index)."""
    return {
        "query": build_search_query(text, filters),
        "sort": copy.deepcopy(SEARCH_SORT),
        "from_": page_offset(page, size),
        "size": size,
        "aggs": build_aggregations(),
        "track_total_hits": True,
    }


def build_list_request(page: int, size: int) -> dict[str, Any]:
    """Newest-first listing of the whole index."""
    return {
        "query": {"match_all": {}},
        "sort": copy.deepcopy(LIST_SORT),
        "from_": page_offset(page, size),
        "size": size,
        "track_total_hits": True,
    }


def _total_hits(hits: dict[str, Any]) -> int:
    total = hits.get("total")
    if isinstance(total, dict):
        return int(total.get("value", 0))
    if total is None:
        return len(hits.get("hits", []))
    return int(total)


def _term_buckets(agg: dict[str, Any] | None) -> list[TermBucket]:
    if not agg:
        return []
    return [TermBucket(key=str(b["key"]), count=b["doc_count"]) for b in agg.get("buckets", [])]


def _range_buckets(agg: dict[str, Any] | None) -> list[RangeBucket]:
    if not agg:
        return []
    buckets = agg.get("buckets", [])
    # Keyed responses come back as a dict of key -> bucket
    if isinstance(buckets, dict):
        buckets = [{"key": k, **v} for k, v in buckets.items()]
    return [
        RangeBucket(key=str(b["key"]), from_=b.get("from"), to=b.get("to"), count=b["doc_count"])
        for b in buckets
    ]


def parse_aggregations(aggs: dict[str, Any] | None) -> SearchAggregations:
    aggs = aggs or {}
    return SearchAggregations(
        categories=_term_buckets(aggs.get("categories")),
        brands=_term_buckets(aggs.get("brands")),
        price_ranges=_range_buckets(aggs.get("price_ranges")),
    )


def parse_search_response(body: dict[str, Any]) -> tuple[list[Product], int, SearchAggregations]:
    """Hits as Products, total match count, reshaped aggregation buckets."""
    hits = body.get("hits", {})
    products = [Product.from_document(hit) for hit in hits.get("hits", [])]
    return products, _total_hits(hits), parse_aggregations(body.get("aggregations"))
