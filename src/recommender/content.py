"""Content-based recommendation module.

Ranks catalog products by how similar they are to the products already in
a user's cart. Similarity combines category match and price proximity
(see :mod:`src.recommender.scoring`) and is averaged over every cart item.
"""

import logging
import time
from typing import List, Optional, Sequence

import numpy as np

from src.recommender.exceptions import (
    CartRecException,
    ComputationError,
    InvalidArgumentError,
)
from src.recommender.models import Product, ScoredCandidate
from src.recommender.scoring import ScoringWeights, compute_price_range, similarity_matrices

# Configure module logger
logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 4


def validate_top_n(top_n: int) -> int:
    """Make sure top_n is an integer of at least 1."""
    if isinstance(top_n, bool) or not isinstance(top_n, (int, np.integer)):
        raise InvalidArgumentError("top_n", top_n, "must be an integer")
    if top_n < 1:
        raise InvalidArgumentError("top_n", top_n, "must be at least 1")
    return int(top_n)


class ContentRecommender:
    """Scores catalog products against a cart.

    The recommender holds only its weights, so one instance can serve
    concurrent calls.
    """

    def __init__(self, weights: Optional[ScoringWeights] = None):
        self.weights = weights or ScoringWeights()

        logger.debug(
            f"Initialized ContentRecommender: "
            f"Category weight={self.weights.category:.2f}, "
            f"Price weight={self.weights.price:.2f}"
        )

    def score(
        self,
        cart_products: Sequence[Product],
        catalog: Sequence[Product],
        top_n: int = DEFAULT_TOP_N,
        explain: bool = False,
    ) -> List[ScoredCandidate]:
        """Get the top N catalog products most similar to the cart.

        Args:
            cart_products: Products currently in the user's cart.
            catalog: Full product catalog.
            top_n: Maximum number of recommendations (default: 4).
            explain: If True, attach the mean category and price
                similarity to each candidate.

        Returns:
            Candidates sorted by descending score. Equal scores keep their
            catalog order. Never contains a product whose id, compared as
            text, matches a cart product id.

        Raises:
            InvalidArgumentError: If top_n is not an integer >= 1.
            ComputationError: If scoring fails unexpectedly.
        """
        top_n = validate_top_n(top_n)
        start_time = time.time()

        if not cart_products:
            logger.debug("Empty cart, nothing to recommend from")
            return []
        if not catalog:
            logger.debug("Empty catalog, nothing to recommend")
            return []

        try:
            # Ids match by string form, as the cart reader matches them
            cart_ids = {str(product.id) for product in cart_products}
            candidates = [product for product in catalog if str(product.id) not in cart_ids]

            if not candidates:
                logger.info(
                    "No eligible candidates outside the cart",
                    extra={"cart_size": len(cart_products), "catalog_size": len(catalog)},
                )
                return []

            # Price range covers the full catalog, cart products included
            min_price, max_price = compute_price_range(catalog)
            category_sim, price_sim = similarity_matrices(
                candidates, cart_products, min_price, max_price
            )

            # Average over cart references
            combined = self.weights.combine(category_sim, price_sim)
            scores = combined.sum(axis=1) / len(cart_products)

            # Stable sort on negated scores keeps catalog order for ties
            order = np.argsort(-scores, kind="stable")[:top_n]

            if explain:
                mean_category = category_sim.mean(axis=1)
                mean_price = price_sim.mean(axis=1)

            results = []
            for idx in order:
                breakdown = {}
                if explain:
                    breakdown = {
                        "category_similarity": float(mean_category[idx]),
                        "price_similarity": float(mean_price[idx]),
                    }
                results.append(
                    ScoredCandidate(
                        product=candidates[int(idx)],
                        score=float(scores[idx]),
                        breakdown=breakdown,
                    )
                )
        except CartRecException:
            raise
        except Exception as e:
            logger.error(
                "Scoring failed",
                extra={"error": str(e), "error_type": type(e).__name__},
                exc_info=True,
            )
            raise ComputationError(
                e, details={"cart_size": len(cart_products), "catalog_size": len(catalog)}
            ) from e

        compute_time = time.time() - start_time
        logger.debug(
            "Computed recommendations",
            extra={
                "cart_size": len(cart_products),
                "num_candidates": len(candidates),
                "num_recommendations": len(results),
                "compute_time_ms": round(compute_time * 1000, 2),
            },
        )

        return results


def recommend_for_cart(
    cart_products: Sequence[Product],
    catalog: Sequence[Product],
    top_n: int = DEFAULT_TOP_N,
    weights: Optional[ScoringWeights] = None,
    explain: bool = False,
) -> List[ScoredCandidate]:
    """Score a cart against a catalog with a one-off recommender.

    Example:
        >>> catalog = [Product(id=1, price=10, category="A"),
        ...            Product(id=2, price=20, category="B"),
        ...            Product(id=3, price=10, category="A")]
        >>> [c.id for c in recommend_for_cart([catalog[0]], catalog, top_n=2)]
        [3, 2]
    """
    return ContentRecommender(weights=weights).score(
        cart_products, catalog, top_n=top_n, explain=explain
    )
