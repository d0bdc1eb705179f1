"""
Domain errors - one class per failure kind, mapped to HTTP status in main.py.
Callers branch on the exception type, never on message text.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for errors the API reports with a typed payload."""

    status_code = 500
    error = "Internal Server Error"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error, "message": self.message, "details": self.details}


class ProductValidationError(CatalogError):
    """One or more field rules violated. `errors` holds every violation."""

    status_code = 400
    error = "Validation Error"

    def __init__(self, errors: list[str], product_id: str | None = None):
        if product_id:
            message = f"Validation failed for product {product_id}: {', '.join(errors)}"
        else:
            message = f"Validation failed: {', '.join(errors)}"
        super().__init__(message, details=errors)
        self.errors = errors
        self.product_id = product_id


class ProductNotFoundError(CatalogError):
    status_code = 404
    error = "Not Found"

    def __init__(self, product_id: str):
        super().__init__("Product not found", details={"id": product_id})
        self.product_id = product_id


class BadRequestError(CatalogError):
    """Malformed request the schema layer cannot catch (e.g. bulk size limit)."""

    status_code = 400
    error = "Bad Request"


class BulkIndexError(CatalogError):
    """The search service rejected some items of a bulk write; the batch fails as a whole."""

    status_code = 500
    error = "Bulk Indexing Error"

    def __init__(self, failures: list[dict[str, Any]]):
        super().__init__(f"Bulk indexing errors for {len(failures)} product(s)", details=failures)
        self.failures = failures
