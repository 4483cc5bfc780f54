"""FastAPI application main module.

This module defines the main FastAPI application instance and core API endpoints
for the CartRec recommendation service. It provides health, status and metrics
endpoints, maps service errors to JSON responses, and serves as the entry point
for the API server.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from src import __version__
from src.api.logging_config import RequestLoggingMiddleware, setup_logging
from src.api.metrics import metrics_service
from src.api.routes import recommend
from src.config import Settings, get_settings
from src.recommender.catalog import create_readers, get_data_paths
from src.recommender.exceptions import CartRecException

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(get_settings().log_level)
    logger.info("CartRec API starting", extra={"version": __version__})
    yield


# Create FastAPI application instance
app = FastAPI(
    title="CartRec API",
    description="Content-based product recommendations for shopping carts",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(recommend.router)


@app.exception_handler(CartRecException)
async def cartrec_exception_handler(request: Request, exc: CartRecException) -> JSONResponse:
    """Render service errors as JSON with their status code."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        exc.message,
        extra={
            "request_id": getattr(request.state, "request_id", None),
            "path": str(request.url.path),
            "status_code": exc.status_code,
            "error_type": type(exc).__name__,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error_label,
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint.

    Returns:
        Dictionary with status key set to "ok".

    Example:
        >>> response = client.get("/ping")
        >>> assert response.json() == {"status": "ok"}
    """
    return {"status": "ok"}


@app.get("/status")
def service_status(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    """Report where data is read from and whether it is available.

    Works even when the data files are missing, in which case
    ``catalog_available`` is false and ``num_products`` is 0.
    """
    catalog_path, cart_path = get_data_paths(
        settings.data_dir, settings.catalog_filename, settings.cart_filename
    )

    num_products = 0
    catalog_available = False
    if catalog_path.exists():
        catalog_reader, _ = create_readers(
            settings.data_dir, settings.catalog_filename, settings.cart_filename
        )
        try:
            num_products = len(catalog_reader.read_frame())
            catalog_available = True
        except CartRecException as e:
            logger.warning(f"Catalog unreadable: {e.message}")

    return {
        "version": __version__,
        "data_dir": settings.data_dir,
        "catalog_available": catalog_available,
        "cart_available": cart_path.exists(),
        "num_products": num_products,
        "weights": settings.scoring_weights().to_dict(),
        "default_top_n": settings.default_top_n,
    }


@app.get("/metrics")
def get_metrics() -> Dict[str, Any]:
    """Scoring call counts and latency statistics."""
    return metrics_service.get_metrics()


if __name__ == "__main__":
    import sys
    from pathlib import Path

    import uvicorn

    # Add project root to Python path for imports
    project_root = Path(__file__).parent.parent.parent
    sys.path.insert(0, str(project_root))

    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
