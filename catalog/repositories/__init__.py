# Repository pattern: abstract search-service access (SOLID - Dependency Inversion)

from catalog.repositories.product_repository import ProductRepository

__all__ = ["ProductRepository"]
