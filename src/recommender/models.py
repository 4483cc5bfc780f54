"""Domain records used by the recommendation engine.

Products and cart entries are read-only snapshots for the duration of a
scoring call, so they are modelled as frozen dataclasses.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Mapping, Optional

PRODUCT_FIELDS = ("id", "name", "price", "image", "description", "category")


@dataclass(frozen=True)
class Product:
    """A catalog product.

    ``price`` is kept as delivered by the upstream source; it may be a
    string or missing and is coerced only when scoring.
    """

    id: Hashable
    name: str = ""
    price: Any = None
    category: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Product":
        """Build a product from a dict-like record, ignoring unknown keys."""
        if "id" not in data:
            raise KeyError("Product record is missing 'id'")
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            price=data.get("price"),
            category=data.get("category"),
            image=data.get("image"),
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in PRODUCT_FIELDS}


@dataclass(frozen=True)
class CartEntry:
    """A product held in a user's cart. Quantity does not affect scoring."""

    product_id: Hashable
    quantity: int = 1


@dataclass(frozen=True)
class ScoredCandidate:
    """A recommended product annotated with its similarity score.

    ``breakdown`` is only filled in explain mode and holds the mean
    category and price similarity against the cart.
    """

    product: Product
    score: float
    breakdown: Dict[str, float] = field(default_factory=dict)

    @property
    def id(self) -> Hashable:
        return self.product.id

    def to_dict(self) -> Dict[str, Any]:
        data = self.product.to_dict()
        data["score"] = self.score
        if self.breakdown:
            data["breakdown"] = dict(self.breakdown)
        return data
