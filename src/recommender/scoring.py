"""Price normalization and product similarity.

Both similarity components are bounded to [0, 1] so they can be mixed with
a fixed weighted sum: category match counts for 70% of the similarity and
price proximity for 30% by default.
"""

import logging
import math
from decimal import Decimal
from typing import Any, Iterable, Optional, Sequence, Tuple

import numpy as np

from src.recommender.exceptions import InvalidArgumentError
from src.recommender.models import Product

# Configure module logger
logger = logging.getLogger(__name__)

# Default weights for similarity scoring
DEFAULT_CATEGORY_WEIGHT = 0.7  # 70% category match
DEFAULT_PRICE_WEIGHT = 0.3  # 30% price proximity

# Returned for every price when the catalog has a single distinct price
NEUTRAL_NORMALIZED_PRICE = 0.5


def coerce_price(value: Any) -> float:
    """Convert a raw price to a float, treating anything unusable as 0.

    Strings are parsed, ``Decimal`` and numeric types are converted, and
    missing, non-numeric, NaN or infinite values become 0.0. Never raises.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError, ArithmeticError):
        return 0.0
    if math.isnan(price) or math.isinf(price):
        return 0.0
    return price


def compute_price_range(catalog: Iterable[Product]) -> Tuple[float, float]:
    """Get the minimum and maximum coerced price over the catalog.

    Returns (0.0, 0.0) for an empty catalog.
    """
    prices = [coerce_price(product.price) for product in catalog]
    if not prices:
        return 0.0, 0.0
    return min(prices), max(prices)


def normalize_price(price: Any, min_price: float, max_price: float) -> float:
    """Rescale a price into [0, 1] relative to the catalog price range.

    Args:
        price: Raw price value. Coerced with :func:`coerce_price`.
        min_price: Lowest price observed in the catalog.
        max_price: Highest price observed in the catalog.

    Returns:
        ``(price - min_price) / (max_price - min_price)``, or exactly 0.5
        when the range is degenerate (``max_price == min_price``).

    Example:
        >>> normalize_price(15, 10, 20)
        0.5
        >>> normalize_price("oops", 0, 20)
        0.0
    """
    denominator = max_price - min_price
    if denominator == 0:
        return NEUTRAL_NORMALIZED_PRICE
    return (coerce_price(price) - min_price) / denominator


def normalize_category(category: Optional[str]) -> str:
    if category is None:
        return ""
    if not isinstance(category, str):
        category = str(category)
    return category.strip().lower()


def category_similarity(category_a: Optional[str], category_b: Optional[str]) -> float:
    """1.0 when both labels are non-empty and match case-insensitively, else 0.0."""
    a = normalize_category(category_a)
    b = normalize_category(category_b)
    if a and b and a == b:
        return 1.0
    return 0.0


def price_similarity(normalized_a: float, normalized_b: float) -> float:
    """Price proximity of two normalized prices, ``1 - |a - b|``."""
    return float(price_similarity_matrix([normalized_a], [normalized_b])[0, 0])


def price_similarity_matrix(candidate_prices, reference_prices) -> np.ndarray:
    """Pairwise price proximity of normalized prices.

    Returns a ``len(candidate_prices) x len(reference_prices)`` array of
    ``1 - |a - b|`` clamped to [0, 1].
    """
    candidates = np.asarray(candidate_prices, dtype=float).reshape(-1)
    references = np.asarray(reference_prices, dtype=float).reshape(-1)
    similarity = 1.0 - np.abs(candidates[:, None] - references[None, :])
    # Prices outside the catalog range normalize outside [0, 1]
    return np.clip(similarity, 0.0, 1.0)


def category_similarity_matrix(
    candidates: Sequence[Product], references: Sequence[Product]
) -> np.ndarray:
    """Pairwise category match between candidates and references."""
    return np.array(
        [[category_similarity(c.category, r.category) for r in references] for c in candidates],
        dtype=float,
    ).reshape(len(candidates), len(references))


def similarity_matrices(
    candidates: Sequence[Product],
    references: Sequence[Product],
    min_price: float,
    max_price: float,
) -> Tuple[np.ndarray, np.ndarray]:
    """Category and price similarity of every candidate against every reference.

    Returns:
        ``(category_sim, price_sim)``, each shaped
        ``(len(candidates), len(references))``.
    """
    candidate_prices = [normalize_price(p.price, min_price, max_price) for p in candidates]
    reference_prices = [normalize_price(p.price, min_price, max_price) for p in references]
    return (
        category_similarity_matrix(candidates, references),
        price_similarity_matrix(candidate_prices, reference_prices),
    )


class ScoringWeights:
    """Relative importance of category and price similarity.

    Weights are rescaled to sum to 1.0 so the combined similarity stays
    within [0, 1].
    """

    def __init__(
        self,
        category: float = DEFAULT_CATEGORY_WEIGHT,
        price: float = DEFAULT_PRICE_WEIGHT,
    ):
        for name, value in (("category_weight", category), ("price_weight", price)):
            if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
                raise InvalidArgumentError(name, value, "must be a number")
            if not math.isfinite(float(value)) or value < 0:
                raise InvalidArgumentError(name, value, "must be a finite non-negative number")

        total = float(category) + float(price)
        if total <= 0:
            raise InvalidArgumentError(
                "category_weight + price_weight", total, "weights must not both be zero"
            )

        self.category = float(category) / total
        self.price = float(price) / total

        if not math.isclose(total, 1.0):
            logger.debug(
                "Rescaled scoring weights",
                extra={"category_weight": self.category, "price_weight": self.price},
            )

    def __repr__(self) -> str:
        return f"ScoringWeights(category={self.category:.2f}, price={self.price:.2f})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScoringWeights):
            return NotImplemented
        return self.category == other.category and self.price == other.price

    def to_dict(self):
        return {"category": self.category, "price": self.price}

    def combine(self, category_sim, price_sim):
        """Weighted sum of category and price similarity (scalars or arrays)."""
        return self.category * category_sim + self.price * price_sim


def combined_similarity(
    candidate: Product,
    reference: Product,
    min_price: float,
    max_price: float,
    weights: Optional[ScoringWeights] = None,
) -> float:
    """Weighted similarity between a candidate and one cart reference product.

    Args:
        candidate: Catalog product being scored.
        reference: Product from the user's cart.
        min_price: Catalog-wide minimum price.
        max_price: Catalog-wide maximum price.
        weights: Category/price weights. Defaults to 0.7/0.3.

    Returns:
        ``weights.category * category_sim + weights.price * price_sim``.
    """
    if weights is None:
        weights = ScoringWeights()

    category_sim, price_sim = similarity_matrices([candidate], [reference], min_price, max_price)
    return float(weights.combine(category_sim, price_sim)[0, 0])
