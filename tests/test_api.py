"""Tests for the FastAPI application endpoints.

This module contains integration tests for the CartRec API endpoints,
including health checks, status, metrics and recommendation endpoints.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.api.main import app
from src.api.metrics import metrics_service
from src.config import Settings, get_settings

PRODUCTS_CSV = """id,name,price,image,description,category
1,Red Shoe,50,a.jpg,Running shoe,Shoes
2,Blue Shoe,55,b.jpg,Walking shoe,Shoes
4,Cap,abc,d.jpg,Plain cap,Caps
"""

CARTS_CSV = """user_id,product_id,quantity
7,1,2
"""


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "products.csv").write_text(PRODUCTS_CSV)
    (tmp_path / "carts.csv").write_text(CARTS_CSV)
    return tmp_path


@pytest.fixture
def client(data_dir):
    """Test client reading data from a temporary directory."""
    app.dependency_overrides[get_settings] = lambda: Settings(data_dir=str(data_dir))
    metrics_service.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_ping_endpoint(client):
    """Test that the /ping endpoint returns correct status and JSON."""
    response = client.get("/ping")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "X-Request-ID" in response.headers


def test_status_endpoint(client, data_dir):
    """Test that the /status endpoint reports data availability."""
    response = client.get("/status")

    assert response.status_code == 200
    data = response.json()

    assert data["data_dir"] == str(data_dir)
    assert data["catalog_available"] is True
    assert data["cart_available"] is True
    assert data["num_products"] == 3
    assert data["default_top_n"] == 4
    assert data["weights"]["category"] == pytest.approx(0.7)
    assert data["weights"]["price"] == pytest.approx(0.3)


def test_recommend_endpoint_returns_ranked_products(client):
    """Test that /recommend/{user_id} ranks the catalog against the cart."""
    response = client.get("/recommend/7")

    assert response.status_code == 200
    data = response.json()

    assert data["user_id"] == "7"
    recommendations = data["recommendations"]
    assert [r["id"] for r in recommendations] == ["2", "4"]

    top = recommendations[0]
    assert top["name"] == "Blue Shoe"
    assert top["price"] == 55.0
    assert top["category"] == "Shoes"
    assert top["image"] == "b.jpg"
    assert top["description"] == "Walking shoe"
    # 0.7 * 1 + 0.3 * (1 - 5 / 55)
    assert top["score"] == pytest.approx(0.7 + 0.3 * 50 / 55)
    assert top["breakdown"] is None

    # Malformed price is reported as 0
    assert recommendations[1]["price"] == 0.0
    assert recommendations[1]["score"] == pytest.approx(0.3 * 5 / 55)


def test_recommend_endpoint_top_n(client):
    response = client.get("/recommend/7?top_n=1")

    assert response.status_code == 200
    assert [r["id"] for r in response.json()["recommendations"]] == ["2"]


def test_recommend_endpoint_empty_cart(client):
    """A user without a cart gets no recommendations."""
    response = client.get("/recommend/999")

    assert response.status_code == 200
    assert response.json()["recommendations"] == []


def test_recommend_endpoint_explain(client):
    response = client.get("/recommend/7?explain=true")

    assert response.status_code == 200
    breakdown = response.json()["recommendations"][0]["breakdown"]
    assert breakdown["category_similarity"] == pytest.approx(1.0)
    assert breakdown["price_similarity"] == pytest.approx(50 / 55)


def test_recommend_endpoint_uses_configured_weights(data_dir):
    app.dependency_overrides[get_settings] = lambda: Settings(
        data_dir=str(data_dir), category_weight=0.0, price_weight=1.0
    )
    try:
        response = TestClient(app).get("/recommend/7")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    data = response.json()
    assert data["weights"] == {"category": 0.0, "price": 1.0}
    assert data["recommendations"][0]["score"] == pytest.approx(50 / 55)


def test_score_endpoint_in_memory(client):
    """POST /recommend/score ranks a caller-supplied cart and catalog."""
    payload = {
        "cart": [{"id": 1, "price": 10, "category": "A"}],
        "catalog": [
            {"id": 1, "name": "One", "price": 10, "category": "A"},
            {"id": 2, "name": "Two", "price": 20, "category": "B"},
            {"id": 3, "name": "Three", "price": 10, "category": "A"},
        ],
        "top_n": 2,
    }

    response = client.post("/recommend/score", json=payload)

    assert response.status_code == 200
    recommendations = response.json()["recommendations"]
    assert [r["id"] for r in recommendations] == [3, 2]
    assert recommendations[0]["score"] == pytest.approx(1.0)
    assert recommendations[0]["name"] == "Three"


def test_score_endpoint_matches_ids_as_text(client):
    """A cart id of "1" excludes catalog id 1."""
    payload = {
        "cart": [{"id": "1", "price": 10, "category": "A"}],
        "catalog": [
            {"id": 1, "price": 10, "category": "A"},
            {"id": 2, "price": 10, "category": "A"},
        ],
    }

    response = client.post("/recommend/score", json=payload)

    assert response.status_code == 200
    assert [r["id"] for r in response.json()["recommendations"]] == [2]


def test_score_endpoint_empty_cart(client):
    payload = {"cart": [], "catalog": [{"id": "a", "price": 5, "category": "A"}]}

    response = client.post("/recommend/score", json=payload)

    assert response.status_code == 200
    assert response.json()["recommendations"] == []


def test_score_endpoint_default_top_n(client):
    catalog = [{"id": i, "price": i, "category": "A"} for i in range(1, 11)]
    payload = {"cart": [catalog[0]], "catalog": catalog}

    response = client.post("/recommend/score", json=payload)

    assert response.status_code == 200
    assert len(response.json()["recommendations"]) == 4


def test_metrics_endpoint_counts_scoring_calls(client):
    client.get("/recommend/7")
    client.get("/recommend/999")
    client.get("/recommend/7?top_n=0")

    response = client.get("/metrics")

    assert response.status_code == 200
    data = response.json()
    assert data["scoring_count"] == 2
    assert data["empty_count"] == 1
    assert data["error_count"] == 1
    assert data["average_recommendations"] == pytest.approx(1.0)
    assert data["max_latency_ms"] >= data["min_latency_ms"] >= 0.0
