"""
Canonical catalog data contract.
Everything that shows or prices a product depends on this shape.
"""
from dataclasses import dataclass
from typing import Dict, Any


@dataclass(frozen=True)
class Product:
    """
    A product as served by GET /products.
    Immutable once fetched; the catalog replaces products wholesale on re-fetch.
    """
    id: str
    name: str
    category: str
    cost: float
    rating: int
    image: str = ""

    @property
    def is_valid(self) -> bool:
        """Basic validation rules."""
        if not self.id:
            return False
        if self.cost < 0:
            return False
        if self.rating < 0 or self.rating > 5:
            return False
        return True

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on name or category. Whitespace counts."""
        needle = query.lower()
        if not needle:
            return True
        return needle in self.name.lower() or needle in self.category.lower()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the backend's JSON shape."""
        return {
            "_id": self.id,
            "name": self.name,
            "category": self.category,
            "cost": self.cost,
            "rating": self.rating,
            "image": self.image
        }
