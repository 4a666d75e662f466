"""
catalog/store.py -- SQLAlchemy-backed persistence for products and wishlists.

Uses SQLAlchemy Core (not ORM) so the dataclasses in catalog/models.py remain
the authoritative domain representation.

Pattern: Repository + Data Mapper. CatalogStore is the repository; the
_row_to_* functions are the mappers. Route handlers never touch SQL directly.

Security: all queries use bound parameters. The filtered listing SQL comes
from catalog/query.py, which only ever interpolates fixed fragments.

JSON columns: colors and images are lists serialized as JSON text. They are
encoded on every write and decoded on every read; a NULL, empty or corrupt
value decodes to [] rather than failing the request.

Insert-or-ignore (seed_demo, add_to_wishlist) uses the SQLite dialect's
ON CONFLICT DO NOTHING, so the store is tied to SQLite.

Usage:
    store = CatalogStore(engine)
    product_id = store.create_product(Product(name="Tee", slug="tee", price=20.0))
    products = store.list_products(ProductFilters(q="tee", sort="price_asc"))
    store.add_to_wishlist(user_id, product_id)
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional, Union

from sqlalchemy import (
    Column,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    or_,
    select,
    text,
)
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine

from catalog.demo import DEMO_PRODUCTS
from catalog.models import Product, WishlistItem
from catalog.query import ProductFilters, build_product_query

logger = logging.getLogger("caprio.catalog")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("slug", String(255), unique=True),  # NULL allowed; SQLite treats NULLs as distinct
    Column("description", Text),
    Column("price", Float, nullable=False, server_default="0"),
    Column("rating", Float, nullable=False, server_default="0"),
    Column("reviews", Integer, nullable=False, server_default="0"),
    Column("colors", Text),  # JSON array of {"name", "hex"} swatches
    Column("images", Text),  # JSON array of image URLs
    Column("category", String(100), nullable=False, server_default=""),
    Column("age_group", String(100), nullable=False, server_default=""),
    Column("created_at", String(32), nullable=False),
)

_wishlists = Table(
    "wishlists",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False),
    Column("product_id", Integer, nullable=False),
    Column("created_at", String(32), nullable=False),
    UniqueConstraint("user_id", "product_id", name="uq_wishlist_user_product"),
)

# Fields a caller may pass to update_product().
_EDITABLE_FIELDS = {
    "name",
    "slug",
    "description",
    "price",
    "rating",
    "reviews",
    "colors",
    "images",
    "category",
    "age_group",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _decode_json_list(value: Optional[str]) -> list:
    """Decode a JSON array column. NULL, empty or corrupt text yields []."""
    if not value:
        return []
    try:
        decoded = json.loads(value)
    except ValueError:
        logger.warning("Discarding undecodable JSON column value: %.60r", value)
        return []
    return decoded if isinstance(decoded, list) else []


def _product_values(product: Product) -> dict:
    return {
        "name": product.name,
        "slug": product.slug,
        "description": product.description,
        "price": product.price,
        "rating": product.rating,
        "reviews": product.reviews,
        "colors": json.dumps(product.colors or []),
        "images": json.dumps(product.images or []),
        "category": product.category or "",
        "age_group": product.age_group or "",
        "created_at": _now_iso(),
    }


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CatalogStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def list_products(self, filters: ProductFilters) -> list[Product]:
        """Return products matching filters in the requested order."""
        sql, params = build_product_query(filters)
        with self.engine.connect() as conn:
            rows = conn.execute(text(sql), params).fetchall()
        return [_row_to_product(r) for r in rows]

    def get_product(self, key: Union[int, str]) -> Optional[Product]:
        """Fetch a product by numeric id or by slug. Returns None if not found."""
        key = str(key)
        condition = _products.c.slug == key
        if key.isdigit():
            condition = or_(_products.c.id == int(key), condition)
        with self.engine.connect() as conn:
            row = conn.execute(_products.select().where(condition).order_by(_products.c.id).limit(1)).fetchone()
        return _row_to_product(row) if row is not None else None

    def get_product_by_id(self, product_id: int) -> Optional[Product]:
        """Fetch a product by primary key only. Slugs are never consulted."""
        with self.engine.connect() as conn:
            row = conn.execute(_products.select().where(_products.c.id == product_id)).fetchone()
        return _row_to_product(row) if row is not None else None

    def create_product(self, product: Product) -> int:
        """Insert a product and return its assigned database ID.

        Raises sqlalchemy.exc.IntegrityError if the slug already exists.
        """
        with self.engine.connect() as conn:
            result = conn.execute(_products.insert().values(**_product_values(product)))
            conn.commit()
            return result.inserted_primary_key[0]

    def update_product(self, product_id: int, **fields) -> bool:
        """Update editable fields on an existing product.

        colors and images must be passed as lists; this method serializes
        them to JSON before writing. Unknown field names raise ValueError.

        Returns True if a row was updated, False if product_id was not found.
        Raises sqlalchemy.exc.IntegrityError if a new slug collides.
        """
        unknown = set(fields) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown product fields: {unknown!r}")
        for key in ("colors", "images"):
            if key in fields:
                fields[key] = json.dumps(fields[key] or [])
        for key in ("category", "age_group"):
            if key in fields:
                fields[key] = fields[key] or ""
        if not fields:
            return self.get_product_by_id(product_id) is not None
        with self.engine.connect() as conn:
            result = conn.execute(_products.update().where(_products.c.id == product_id).values(**fields))
            conn.commit()
        return result.rowcount > 0

    def delete_product(self, product_id: int) -> bool:
        """Delete a product and any wishlist entries pointing at it.

        Returns True if the product existed.
        """
        with self.engine.connect() as conn:
            conn.execute(_wishlists.delete().where(_wishlists.c.product_id == product_id))
            result = conn.execute(_products.delete().where(_products.c.id == product_id))
            conn.commit()
        return result.rowcount > 0

    def seed_demo(self) -> int:
        """Insert the demo catalog, skipping products whose slug already exists.

        Safe to call repeatedly. Returns the number of rows actually inserted.
        """
        inserted = 0
        with self.engine.connect() as conn:
            for product in DEMO_PRODUCTS:
                stmt = sqlite_insert(_products).values(**_product_values(product)).on_conflict_do_nothing()
                inserted += conn.execute(stmt).rowcount
            conn.commit()
        logger.info("Demo catalog seeded (%d new products)", inserted)
        return inserted

    # ------------------------------------------------------------------
    # Wishlists
    # ------------------------------------------------------------------

    def list_wishlist(self, user_id: int) -> list[WishlistItem]:
        """Return the user's saved products in the order they were added."""
        query = (
            select(
                _wishlists.c.id,
                _wishlists.c.product_id,
                _products.c.name,
                _products.c.price,
                _products.c.images,
            )
            .select_from(_wishlists.join(_products, _products.c.id == _wishlists.c.product_id))
            .where(_wishlists.c.user_id == user_id)
            .order_by(_wishlists.c.id)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(query).fetchall()
        return [_row_to_wishlist_item(r) for r in rows]

    def add_to_wishlist(self, user_id: int, product_id: int) -> bool:
        """Save a product for a user. Returns True if a new entry was created.

        Adding the same (user, product) pair again is a no-op.
        """
        stmt = (
            sqlite_insert(_wishlists)
            .values(user_id=user_id, product_id=product_id, created_at=_now_iso())
            .on_conflict_do_nothing()
        )
        with self.engine.connect() as conn:
            result = conn.execute(stmt)
            conn.commit()
        return result.rowcount > 0

    def remove_from_wishlist(self, user_id: int, product_id: int) -> bool:
        """Remove a saved product. Returns True if an entry was deleted."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _wishlists.delete().where((_wishlists.c.user_id == user_id) & (_wishlists.c.product_id == product_id))
            )
            conn.commit()
        return result.rowcount > 0


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_product(row) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        slug=row.slug,
        description=row.description,
        price=row.price if row.price is not None else 0.0,
        rating=row.rating if row.rating is not None else 0.0,
        reviews=row.reviews or 0,
        colors=_decode_json_list(row.colors),
        images=_decode_json_list(row.images),
        category=row.category or "",
        age_group=row.age_group or "",
        created_at=row.created_at,
    )


def _row_to_wishlist_item(row) -> WishlistItem:
    return WishlistItem(
        id=row.id,
        product_id=row.product_id,
        name=row.name,
        price=row.price if row.price is not None else 0.0,
        images=_decode_json_list(row.images),
    )
