"""Generate a fake product catalog and user carts for development.

This module creates synthetic store data for trying out the recommender.
It writes two CSV files: a product catalog and a table of cart entries.

Example:
    Run the script directly to generate default data:
        $ python scripts/generate_fake_data.py

    Or import and use programmatically:
        from scripts.generate_fake_data import generate_fake_catalog
        products = generate_fake_catalog(num_products=50)
"""

import random
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import pandas as pd

# Default configuration constants
DEFAULT_NUM_USERS = 20
DEFAULT_NUM_PRODUCTS = 60
DEFAULT_MAX_CART_SIZE = 4
DEFAULT_RANDOM_SEED = 42

CATEGORIES = {
    "Shoes": (40.0, 180.0),
    "Bags": (25.0, 300.0),
    "Jackets": (60.0, 400.0),
    "Caps": (10.0, 45.0),
    "Tops": (12.0, 90.0),
}
ADJECTIVES = ["Classic", "Modern", "Vintage", "Everyday", "Premium", "Light", "Urban"]


def generate_fake_catalog(
    num_products: int = DEFAULT_NUM_PRODUCTS,
    random_seed: Optional[int] = DEFAULT_RANDOM_SEED,
) -> pd.DataFrame:
    """Generate a synthetic product catalog.

    Args:
        num_products: Number of products to create. Must be positive.
        random_seed: Seed for reproducible output. None for random data.

    Returns:
        A pandas DataFrame with columns id, name, price, image,
        description and category.

    Raises:
        ValueError: If num_products is not positive.
    """
    if num_products <= 0:
        raise ValueError("num_products must be positive")

    rng = random.Random(random_seed)
    categories = list(CATEGORIES)

    products = []
    for product_id in range(1, num_products + 1):
        category = rng.choice(categories)
        low, high = CATEGORIES[category]
        adjective = rng.choice(ADJECTIVES)
        name = f"{adjective} {category[:-1]} {product_id}"
        products.append({
            "id": product_id,
            "name": name,
            "price": round(rng.uniform(low, high), 2),
            "image": f"product_{product_id}.jpg",
            "description": f"{adjective} {category.lower()} item",
            "category": category,
        })

    return pd.DataFrame(products)


def generate_fake_carts(
    product_ids: list,
    num_users: int = DEFAULT_NUM_USERS,
    max_cart_size: int = DEFAULT_MAX_CART_SIZE,
    random_seed: Optional[int] = DEFAULT_RANDOM_SEED,
    expired_share: float = 0.1,
) -> pd.DataFrame:
    """Generate cart entries for a set of users.

    Each user gets between 0 and ``max_cart_size`` distinct products. A
    share of the entries is given an ``expires_at`` in the past so the
    expiry handling of the cart reader has something to skip.

    Returns:
        A pandas DataFrame with columns user_id, product_id, quantity and
        expires_at (empty for entries that never expire).
    """
    if num_users <= 0 or max_cart_size < 0:
        raise ValueError("num_users must be positive and max_cart_size non-negative")
    if not product_ids:
        raise ValueError("product_ids must not be empty")

    rng = random.Random(random_seed)
    now = datetime.now()

    entries = []
    for user_id in range(1, num_users + 1):
        cart_size = rng.randint(0, min(max_cart_size, len(product_ids)))
        for product_id in rng.sample(list(product_ids), cart_size):
            expires_at = ""
            if rng.random() < expired_share:
                expires_at = (now - timedelta(days=rng.randint(1, 30))).isoformat()
            entries.append({
                "user_id": user_id,
                "product_id": product_id,
                "quantity": rng.randint(1, 3),
                "expires_at": expires_at,
            })

    return pd.DataFrame(entries, columns=["user_id", "product_id", "quantity", "expires_at"])


def main() -> None:
    """Main entry point for the data generation script.

    Writes data/products.csv and data/carts.csv and prints a summary.
    """
    print(f"Generating {DEFAULT_NUM_PRODUCTS} products and carts for {DEFAULT_NUM_USERS} users...")

    try:
        products = generate_fake_catalog()
        carts = generate_fake_carts(products["id"].tolist())
    except ValueError as e:
        print(f"Error generating data: {e}")
        return

    data_dir = Path(__file__).parent.parent / 'data'
    data_dir.mkdir(exist_ok=True)

    products_path = data_dir / 'products.csv'
    carts_path = data_dir / 'carts.csv'
    products.to_csv(products_path, index=False)
    carts.to_csv(carts_path, index=False)

    print(f"\nData generated successfully!")
    print(f"Saved to: {products_path} and {carts_path}")
    print(f"\nCatalog preview:")
    print(products.head(10))
    print(f"\nData summary:")
    print(f"  Products: {len(products)}")
    print(f"  Categories: {products['category'].nunique()}")
    print(f"  Cart entries: {len(carts)}")
    print(f"  Users with a cart: {carts['user_id'].nunique()}")


if __name__ == '__main__':
    main()
