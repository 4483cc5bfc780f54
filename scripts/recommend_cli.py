"""CLI script for getting cart-based product recommendations.

Useful for testing and evaluation. Reads a user's cart and the catalog from
a data directory and prints the recommended products to the console.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.recommender.catalog import CART_FILENAME, CATALOG_FILENAME, create_readers
from src.recommender.content import DEFAULT_TOP_N, ContentRecommender
from src.recommender.exceptions import CartRecException
from src.recommender.models import ScoredCandidate
from src.recommender.scoring import (
    DEFAULT_CATEGORY_WEIGHT,
    DEFAULT_PRICE_WEIGHT,
    ScoringWeights,
)

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)


def get_recommendations(
    user_id: str,
    data_dir: str = "data",
    top_n: int = DEFAULT_TOP_N,
    category_weight: float = DEFAULT_CATEGORY_WEIGHT,
    price_weight: float = DEFAULT_PRICE_WEIGHT,
    explain: bool = False,
    catalog_filename: str = CATALOG_FILENAME,
    cart_filename: str = CART_FILENAME,
) -> List[ScoredCandidate]:
    """Get recommendations for a user's cart.

    Args:
        user_id: User whose cart to read
        data_dir: Directory with products.csv and carts.csv
        top_n: Number of recommendations to return
        category_weight: Weight of the category match
        price_weight: Weight of the price proximity
        explain: If True, attach similarity breakdowns

    Returns:
        Ranked list of scored candidates

    Raises:
        CartRecException: If the data cannot be read or an argument is invalid
    """
    catalog_reader, cart_reader = create_readers(data_dir, catalog_filename, cart_filename)
    catalog = catalog_reader.read_catalog()
    cart_products = cart_reader.read_cart(user_id, catalog=catalog)

    if not cart_products:
        logger.info(f"Cart of user {user_id} is empty")

    recommender = ContentRecommender(
        weights=ScoringWeights(category=category_weight, price=price_weight)
    )
    return recommender.score(cart_products, catalog, top_n=top_n, explain=explain)


def main() -> None:
    """Main CLI function."""
    parser = argparse.ArgumentParser(
        description="Get product recommendations for a user's cart",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/recommend_cli.py 42
  python scripts/recommend_cli.py 42 --top-n 6
  python scripts/recommend_cli.py 42 --category-weight 0.5 --price-weight 0.5
  python scripts/recommend_cli.py 42 --explain
        """
    )

    parser.add_argument(
        "user_id",
        type=str,
        help="User ID whose cart to recommend for"
    )

    parser.add_argument(
        "--top-n",
        type=int,
        default=DEFAULT_TOP_N,
        help=f"Number of recommendations to return (default: {DEFAULT_TOP_N})"
    )

    parser.add_argument(
        "--data-dir",
        type=str,
        default="data",
        help="Directory containing products.csv and carts.csv (default: data)"
    )

    parser.add_argument(
        "--category-weight",
        type=float,
        default=DEFAULT_CATEGORY_WEIGHT,
        help=f"Weight of the category match (default: {DEFAULT_CATEGORY_WEIGHT})"
    )

    parser.add_argument(
        "--price-weight",
        type=float,
        default=DEFAULT_PRICE_WEIGHT,
        help=f"Weight of the price proximity (default: {DEFAULT_PRICE_WEIGHT})"
    )

    parser.add_argument(
        "--explain",
        action="store_true",
        help="Show score breakdown for recommendations"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    try:
        recommendations = get_recommendations(
            user_id=args.user_id,
            data_dir=args.data_dir,
            top_n=args.top_n,
            category_weight=args.category_weight,
            price_weight=args.price_weight,
            explain=args.explain,
        )
    except CartRecException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    print(f"\nRecommendations for user {args.user_id}:")
    if not recommendations:
        print("  No recommendations (empty cart or nothing left to suggest)")

    for rank, candidate in enumerate(recommendations, start=1):
        product = candidate.product
        print(f"  {rank}. [{product.id}] {product.name} ({product.category}) score={candidate.score:.4f}")
        if args.explain and candidate.breakdown:
            print(
                f"       category={candidate.breakdown['category_similarity']:.4f} "
                f"price={candidate.breakdown['price_similarity']:.4f}"
            )

    print()


if __name__ == "__main__":
    main()
