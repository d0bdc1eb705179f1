"""
Product model - domain record stored as a document in the search index.
Built from untrusted input, validated before it is persisted.
"""

import math
import random
import string
import time
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ID_PREFIX = "prod_"
_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_product_id() -> str:
    """prod_<epoch millis>_<9 base-36 chars>."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{ID_PREFIX}{int(time.time() * 1000)}_{suffix}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(BaseModel):
    """Product record. Field rules are checked by validation_errors(), not on construction."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(default_factory=generate_product_id)
    name: str | None = None
    description: str | None = None
    category: str | None = None
    brand: str | None = None
    price: float | None = None
    stock: int | None = None
    rating: float = 0.0
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def validation_errors(self) -> list[str]:
        """Every broken field rule, in field order. Empty list means valid."""
        errors = []
        if not self.name or len(self.name.strip()) < 2:
            errors.append("Product name must be at least 2 characters long")
        if not self.description or len(self.description.strip()) < 10:
            errors.append("Product description must be at least 10 characters long")
        if not self.category or not self.category.strip():
            errors.append("Product category is required")
        if not self.brand or not self.brand.strip():
            errors.append("Product brand is required")
        if self.price is None or not math.isfinite(self.price) or self.price <= 0:
            errors.append("Product price must be a positive number")
        if self.stock is None or self.stock < 0:
            errors.append("Product stock must be a non-negative number")
        if not math.isfinite(self.rating) or self.rating < 0 or self.rating > 5:
            errors.append("Product rating must be between 0 and 5")
        return errors

    def to_document(self) -> dict[str, Any]:
        """Storage form: camelCase keys, ISO-8601 timestamps."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Product":
        """Rebuild from a stored document or a raw search hit (`_id` + `_source`)."""
        if "_source" in doc:
            source = dict(doc["_source"])
            source.setdefault("id", doc.get("_id"))
            doc = source
        return cls.model_validate(doc)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name={self.name})>"
