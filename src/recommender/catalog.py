"""Catalog and cart readers.

This module loads the product catalog and user carts from CSV files and
resolves cart entries to the catalog products the recommender scores
against. Any failure to read the data is reported as a RetrievalError.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Hashable, List, Optional

import pandas as pd

from src.recommender.exceptions import RetrievalError
from src.recommender.models import CartEntry, Product

# Configure module logger
logger = logging.getLogger(__name__)

# Default data filenames
CATALOG_FILENAME = "products.csv"
CART_FILENAME = "carts.csv"

CATALOG_COLUMNS = ["id", "name", "price", "image", "description", "category"]
CART_COLUMNS = ["user_id", "product_id"]

TRUTHY_VALUES = {"1", "true", "yes", "y", "t"}


def _read_csv(csv_path: Path, source: str, required_columns: List[str]) -> pd.DataFrame:
    """Read a CSV file and check it has the required columns.

    Raises:
        RetrievalError: If the file is missing, unreadable or lacks columns.
    """
    if not csv_path.exists():
        raise RetrievalError(
            source,
            FileNotFoundError(f"CSV file not found: {csv_path}"),
            details={"path": str(csv_path)},
        )

    try:
        # Everything is read as text; ids stay opaque and prices are coerced later
        df = pd.read_csv(csv_path, dtype=str)
    except pd.errors.EmptyDataError:
        # A file with no header at all is treated as an empty table
        logger.warning(f"{source} file {csv_path} is empty")
        return pd.DataFrame(columns=required_columns)
    except (OSError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise RetrievalError(source, e, details={"path": str(csv_path)}) from e

    missing = set(required_columns) - set(df.columns)
    if missing:
        raise RetrievalError(
            source,
            ValueError(f"CSV missing required columns: {sorted(missing)}"),
            details={"path": str(csv_path)},
        )

    return df


def _is_flag_set(value) -> bool:
    if pd.isna(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_VALUES
    return bool(value)


def _clean_text(value) -> Optional[str]:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return str(value)


class CsvCatalogReader:
    """Reads the product catalog from a CSV file.

    Expected columns: id, name, price, image, description, category. An
    optional ``is_deleted`` column marks products removed from the store;
    those are left out of the catalog.
    """

    def __init__(self, csv_path: str):
        self.csv_path = Path(csv_path)

    def read_frame(self) -> pd.DataFrame:
        df = _read_csv(self.csv_path, "catalog", ["id"])
        df = df[df["id"].notna()].copy()
        for column in CATALOG_COLUMNS:
            if column not in df.columns:
                df[column] = None

        if "is_deleted" in df.columns:
            deleted = df["is_deleted"].map(_is_flag_set).astype(bool)
            if deleted.any():
                logger.info(f"Skipping {int(deleted.sum())} deleted products")
            df = df[~deleted]

        df = df.drop_duplicates(subset="id", keep="first")
        return df.reset_index(drop=True)

    def read_catalog(self) -> List[Product]:
        """Get every active product in the catalog, in file order."""
        df = self.read_frame()

        catalog = [
            Product(
                id=row["id"],
                name=_clean_text(row["name"]) or "",
                price=None if pd.isna(row["price"]) else row["price"],
                category=_clean_text(row["category"]),
                image=_clean_text(row["image"]),
                description=_clean_text(row["description"]),
            )
            for row in df[CATALOG_COLUMNS].to_dict("records")
        ]

        logger.info(
            "Loaded catalog",
            extra={"path": str(self.csv_path), "num_products": len(catalog)},
        )
        return catalog


class CsvCartReader:
    """Reads user carts from a CSV file.

    Expected columns: user_id, product_id and optionally quantity and
    expires_at. Entries past their ``expires_at`` timestamp, and entries
    whose product is no longer in the catalog, are skipped.
    """

    def __init__(self, csv_path: str, catalog_reader: CsvCatalogReader):
        self.csv_path = Path(csv_path)
        self.catalog_reader = catalog_reader

    def read_entries(
        self, user_id: Hashable, now: Optional[datetime] = None
    ) -> List[CartEntry]:
        """Get the live cart entries for a user."""
        df = _read_csv(self.csv_path, "cart", CART_COLUMNS)
        df = df[df["user_id"].astype(str) == str(user_id)]

        if "expires_at" in df.columns and not df.empty:
            if now is None:
                now = datetime.now(timezone.utc)
            elif now.tzinfo is None:
                now = now.replace(tzinfo=timezone.utc)
            expires_at = pd.to_datetime(df["expires_at"], errors="coerce", utc=True)
            expired = expires_at.notna() & (expires_at <= pd.Timestamp(now))
            if expired.any():
                logger.info(
                    "Skipping expired cart entries",
                    extra={"user_id": str(user_id), "num_expired": int(expired.sum())},
                )
            df = df[~expired]

        if "quantity" in df.columns:
            quantities = pd.to_numeric(df["quantity"], errors="coerce").fillna(1)
        else:
            quantities = pd.Series(1, index=df.index)

        return [
            CartEntry(product_id=product_id, quantity=int(quantity))
            for product_id, quantity in zip(df["product_id"].tolist(), quantities.tolist())
        ]

    def read_cart(
        self,
        user_id: Hashable,
        catalog: Optional[List[Product]] = None,
        now: Optional[datetime] = None,
    ) -> List[Product]:
        """Resolve a user's cart to the catalog products it references.

        Args:
            user_id: User whose cart to read.
            catalog: Already loaded catalog. Read from the catalog reader
                when omitted.
            now: Reference time for expiry checks (default: current UTC).

        Returns:
            Cart reference products in cart order, without duplicates.

        Raises:
            RetrievalError: If the cart or catalog cannot be read.
        """
        if catalog is None:
            catalog = self.catalog_reader.read_catalog()

        entries = self.read_entries(user_id, now=now)
        # Ids are compared as text; a catalog passed in may carry non-string ids
        products_by_id = {str(product.id): product for product in catalog}

        cart_products = []
        seen = set()
        for entry in entries:
            key = str(entry.product_id)
            if key in seen:
                continue
            product = products_by_id.get(key)
            if product is None:
                logger.warning(
                    "Cart references unknown or deleted product",
                    extra={"user_id": str(user_id), "product_id": key},
                )
                continue
            seen.add(key)
            cart_products.append(product)

        logger.info(
            "Loaded cart",
            extra={"user_id": str(user_id), "num_items": len(cart_products)},
        )
        return cart_products


def get_data_paths(
    data_dir: str,
    catalog_filename: str = CATALOG_FILENAME,
    cart_filename: str = CART_FILENAME,
):
    """Get file paths for the catalog and cart CSVs without reading them."""
    data_path = Path(data_dir)
    return data_path / catalog_filename, data_path / cart_filename


def create_readers(
    data_dir: str,
    catalog_filename: str = CATALOG_FILENAME,
    cart_filename: str = CART_FILENAME,
):
    """Create catalog and cart readers for a data directory."""
    catalog_path, cart_path = get_data_paths(data_dir, catalog_filename, cart_filename)
    catalog_reader = CsvCatalogReader(str(catalog_path))
    cart_reader = CsvCartReader(str(cart_path), catalog_reader)
    return catalog_reader, cart_reader
