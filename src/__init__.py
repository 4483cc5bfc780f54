"""CartRec: content-based product recommendations for shopping carts.

This package provides a backend service that suggests catalog products
similar to what a user already holds in their cart, scored by category
match and normalized price proximity.

Modules:
    api: FastAPI application and REST API endpoints
    recommender: Scoring engine, domain models and catalog/cart readers
"""

__version__ = "0.1.0"
