"""Tests for price normalization and similarity scoring."""

import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.recommender.exceptions import InvalidArgumentError
from src.recommender.models import Product
from src.recommender.scoring import (
    ScoringWeights,
    category_similarity,
    coerce_price,
    combined_similarity,
    compute_price_range,
    normalize_price,
    category_similarity_matrix,
    price_similarity,
    price_similarity_matrix,
    similarity_matrices,
)


# ===== Price coercion and normalization =====


@pytest.mark.parametrize(
    "raw, expected",
    [
        (10, 10.0),
        (12.5, 12.5),
        ("19.99", 19.99),
        (" 7 ", 7.0),
        (Decimal("3.50"), 3.5),
        (None, 0.0),
        ("", 0.0),
        ("abc", 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        ([1, 2], 0.0),
        (True, 0.0),
    ],
)
def test_coerce_price(raw, expected):
    """Non-numeric or missing prices are treated as 0."""
    assert coerce_price(raw) == pytest.approx(expected)


def test_compute_price_range():
    catalog = [
        Product(id=1, price=10),
        Product(id=2, price="25"),
        Product(id=3, price="broken"),
    ]
    assert compute_price_range(catalog) == (0.0, 25.0)


def test_compute_price_range_empty_catalog():
    assert compute_price_range([]) == (0.0, 0.0)


def test_normalize_price_scales_into_unit_interval():
    assert normalize_price(10, 10, 20) == 0.0
    assert normalize_price(20, 10, 20) == 1.0
    assert normalize_price(15, 10, 20) == pytest.approx(0.5)
    assert normalize_price("12", 10, 20) == pytest.approx(0.2)


@pytest.mark.parametrize("price", [0, 15, "15", None, "junk", 1000])
def test_normalize_price_degenerate_range_is_neutral(price):
    """A catalog with a single distinct price maps every price to 0.5."""
    assert normalize_price(price, 15, 15) == 0.5


def test_normalize_price_malformed_counts_as_zero():
    assert normalize_price("n/a", 0, 40) == 0.0
    assert normalize_price("n/a", 10, 40) == pytest.approx(-10 / 30)


# ===== Similarity =====


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("Shoes", "Shoes", 1.0),
        ("shoes", "SHOES", 1.0),
        (" Shoes ", "shoes", 1.0),
        ("Shoes", "Bags", 0.0),
        ("", "", 0.0),
        (None, None, 0.0),
        ("Shoes", "", 0.0),
        (None, "Shoes", 0.0),
        ("   ", "   ", 0.0),
    ],
)
def test_category_similarity(a, b, expected):
    """Match only on non-empty labels, ignoring case."""
    assert category_similarity(a, b) == expected


def test_price_similarity_bounds():
    assert price_similarity(0.0, 0.0) == 1.0
    assert price_similarity(0.0, 1.0) == 0.0
    assert price_similarity(0.25, 0.75) == pytest.approx(0.5)
    # Out-of-range normalized prices are clamped
    assert price_similarity(-0.5, 1.0) == 0.0


def test_price_similarity_matrix_is_pairwise():
    matrix = price_similarity_matrix([0.0, 0.5, 1.5], [0.0, 1.0])

    assert matrix.shape == (3, 2)
    assert matrix.tolist() == [[1.0, 0.0], [0.5, 0.5], [0.0, 0.5]]


def test_price_similarity_matches_matrix_entries():
    candidates = [0.0, 0.2, 0.9, -0.3]
    references = [0.1, 1.0]
    matrix = price_similarity_matrix(candidates, references)

    for i, a in enumerate(candidates):
        for j, b in enumerate(references):
            assert price_similarity(a, b) == matrix[i, j]


def test_category_similarity_matrix():
    candidates = [Product(id=1, category="A"), Product(id=2, category=" b "), Product(id=3)]
    references = [Product(id=4, category="a"), Product(id=5, category="B")]

    matrix = category_similarity_matrix(candidates, references)

    assert matrix.tolist() == [[1.0, 0.0], [0.0, 1.0], [0.0, 0.0]]


def test_similarity_matrices_empty_inputs():
    category_sim, price_sim = similarity_matrices([], [Product(id=1, price=5)], 0, 10)

    assert category_sim.shape == (0, 1)
    assert price_sim.shape == (0, 1)


def test_combined_similarity_same_category_same_price():
    a = Product(id=1, price=10, category="A")
    b = Product(id=2, price=10, category="a")
    assert combined_similarity(a, b, 10, 20) == pytest.approx(1.0)


def test_combined_similarity_uses_default_weights():
    candidate = Product(id=1, price=20, category="B")
    reference = Product(id=2, price=10, category="A")
    # Different category, opposite ends of the price range
    assert combined_similarity(candidate, reference, 10, 20) == pytest.approx(0.0)

    candidate = Product(id=3, price=15, category="A")
    # 0.7 * 1 + 0.3 * (1 - 0.5)
    assert combined_similarity(candidate, reference, 10, 20) == pytest.approx(0.85)


def test_combined_similarity_custom_weights():
    candidate = Product(id=1, price=15, category="A")
    reference = Product(id=2, price=10, category="A")
    weights = ScoringWeights(category=0.5, price=0.5)
    assert combined_similarity(candidate, reference, 10, 20, weights) == pytest.approx(0.75)


# ===== Weights =====


def test_default_weights():
    weights = ScoringWeights()
    assert weights.category == pytest.approx(0.7)
    assert weights.price == pytest.approx(0.3)
    assert weights.to_dict() == {"category": weights.category, "price": weights.price}


def test_weights_are_rescaled_to_sum_to_one():
    weights = ScoringWeights(category=3, price=1)
    assert weights.category == pytest.approx(0.75)
    assert weights.price == pytest.approx(0.25)


def test_weights_equality():
    assert ScoringWeights(2, 2) == ScoringWeights(0.5, 0.5)
    assert ScoringWeights() != ScoringWeights(0.5, 0.5)


@pytest.mark.parametrize(
    "category, price",
    [(0, 0), (-0.1, 1.0), (0.5, float("nan")), ("heavy", 0.3), (None, 0.3)],
)
def test_invalid_weights_raise(category, price):
    with pytest.raises(InvalidArgumentError) as exc_info:
        ScoringWeights(category=category, price=price)
    assert exc_info.value.status_code == 400
