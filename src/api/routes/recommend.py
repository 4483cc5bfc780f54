"""Recommendation endpoints for the CartRec API.

This module provides API endpoints for recommending catalog products that
are similar to what a user already has in their cart.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.api.metrics import metrics_service
from src.config import Settings, get_settings
from src.recommender.catalog import create_readers
from src.recommender.content import ContentRecommender, validate_top_n
from src.recommender.exceptions import CartRecException, InvalidArgumentError
from src.recommender.models import Product, ScoredCandidate
from src.recommender.scoring import coerce_price

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/recommend",
    tags=["recommendations"],
)

ProductId = Union[int, str]


class ProductIn(BaseModel):
    """A product as sent by the caller. Only id is required."""

    id: ProductId
    name: str = ""
    price: Any = Field(default=None, description="Price; malformed values count as 0")
    category: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None

    def to_product(self) -> Product:
        return Product.from_mapping(self.model_dump())


class ScoreRequest(BaseModel):
    """Request body for scoring an in-memory cart against a catalog."""

    cart: List[ProductIn] = Field(default_factory=list, description="Cart reference products")
    catalog: List[ProductIn] = Field(default_factory=list, description="Full product catalog")
    top_n: Optional[int] = Field(default=None, description="Maximum number of recommendations")
    explain: bool = False


class ScoredProduct(BaseModel):
    """A recommended product with its similarity score."""

    id: ProductId
    name: str
    price: float
    image: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    score: float = Field(..., description="Mean similarity to the cart items")
    breakdown: Optional[Dict[str, float]] = Field(
        default=None, description="Mean category and price similarity (explain mode)"
    )

    @classmethod
    def from_candidate(cls, candidate: ScoredCandidate) -> "ScoredProduct":
        product = candidate.product
        return cls(
            id=product.id,
            name=product.name,
            price=coerce_price(product.price),
            image=product.image,
            description=product.description,
            category=product.category,
            score=candidate.score,
            breakdown=candidate.breakdown or None,
        )


class RecommendationResponse(BaseModel):
    """Response model for cart recommendation requests.

    Attributes:
        user_id: The user whose cart was used.
        recommendations: Recommended products, best match first.
        weights: Category and price weights used for scoring.
    """

    user_id: str = Field(..., description="User ID whose cart was scored")
    recommendations: List[ScoredProduct] = Field(
        ..., description="Recommended products, best match first"
    )
    weights: Dict[str, float] = Field(..., description="Scoring weights")


class ScoreResponse(BaseModel):
    recommendations: List[ScoredProduct]
    weights: Dict[str, float]


def resolve_top_n(top_n: Optional[int], settings: Settings) -> int:
    """Apply the configured default to top_n and check it is in range.

    Raises:
        InvalidArgumentError: If top_n is not a positive integer or exceeds
            the configured maximum.
    """
    if top_n is None:
        top_n = settings.default_top_n
    try:
        top_n = validate_top_n(top_n)
        if top_n > settings.max_top_n:
            raise InvalidArgumentError(
                "top_n", top_n, f"must be at most {settings.max_top_n}"
            )
    except InvalidArgumentError:
        metrics_service.record_error()
        raise
    return top_n


def run_scoring(
    cart_products: List[Product],
    catalog: List[Product],
    top_n: int,
    settings: Settings,
    explain: bool = False,
) -> List[ScoredCandidate]:
    """Score a cart with the configured weights and record metrics.

    ``top_n`` must already have been checked with :func:`resolve_top_n`.
    """
    start_time = time.time()
    try:
        recommender = ContentRecommender(weights=settings.scoring_weights())
        candidates = recommender.score(cart_products, catalog, top_n=top_n, explain=explain)
    except CartRecException:
        metrics_service.record_error()
        raise

    latency_ms = (time.time() - start_time) * 1000
    metrics_service.record_scoring(latency_ms, num_recommendations=len(candidates))
    return candidates


@router.get("/{user_id}", response_model=RecommendationResponse)
def get_recommendations(
    user_id: str,
    top_n: Optional[int] = None,
    explain: bool = False,
    settings: Settings = Depends(get_settings),
) -> RecommendationResponse:
    """Get product recommendations for a user's cart.

    Reads the user's cart and the product catalog, then ranks every catalog
    product outside the cart by its similarity to the cart items.

    Args:
        user_id: User whose cart to recommend for.
        top_n: Number of recommendations to return (default: 4).
        explain: If True, include per-product similarity breakdowns.
        settings: Service settings.

    Returns:
        RecommendationResponse with the ranked products. An empty cart
        yields an empty list.

    Raises:
        RetrievalError: If the cart or catalog cannot be read (503).
        InvalidArgumentError: If top_n is out of range (400).

    Example:
        GET /recommend/42?top_n=2
        Returns the 2 products most similar to user 42's cart.
    """
    logger.info(f"Generating recommendations for user {user_id}, top_n={top_n}")
    top_n = resolve_top_n(top_n, settings)

    catalog_reader, cart_reader = create_readers(
        settings.data_dir, settings.catalog_filename, settings.cart_filename
    )

    try:
        catalog = catalog_reader.read_catalog()
        cart_products = cart_reader.read_cart(user_id, catalog=catalog)
    except CartRecException:
        metrics_service.record_error()
        raise

    candidates = run_scoring(cart_products, catalog, top_n, settings, explain=explain)

    logger.info(
        f"Generated {len(candidates)} recommendations for user {user_id}",
        extra={"user_id": user_id, "cart_size": len(cart_products)},
    )

    return RecommendationResponse(
        user_id=user_id,
        recommendations=[ScoredProduct.from_candidate(c) for c in candidates],
        weights=settings.scoring_weights().to_dict(),
    )


@router.post("/score", response_model=ScoreResponse)
def score_cart(
    request: ScoreRequest,
    settings: Settings = Depends(get_settings),
) -> ScoreResponse:
    """Score an in-memory cart against an in-memory catalog.

    Nothing is read from disk; the caller supplies both collections.
    """
    top_n = resolve_top_n(request.top_n, settings)
    cart_products = [item.to_product() for item in request.cart]
    catalog = [item.to_product() for item in request.catalog]

    candidates = run_scoring(cart_products, catalog, top_n, settings, explain=request.explain)

    return ScoreResponse(
        recommendations=[ScoredProduct.from_candidate(c) for c in candidates],
        weights=settings.scoring_weights().to_dict(),
    )
