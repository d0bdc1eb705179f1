"""Prometheus counters, exposed with the default registry at /metrics."""

from prometheus_client import Counter

PRODUCTS_INDEXED = Counter(
    "catalog_products_indexed_total",
    "Products written to the search index",
    ["operation"],
)

SEARCHES = Counter(
    "catalog_searches_total",
    "Product searches sent to the search index",
    ["kind"],
)
