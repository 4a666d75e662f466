"""
catalog/models.py -- Domain dataclasses for the product catalog.

These are pure data containers with zero logic. Query construction lives in
catalog/query.py; persistence and JSON column decoding live in
catalog/store.py.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Product:
    """A catalog entry.

    colors is a list of swatch dicts ({"name": ..., "hex": ...}) and images a
    list of URLs. Both are stored as JSON text and decoded by the store, so
    callers always see lists.

    id is None before the record is written to the database.
    """

    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    price: float = 0.0
    rating: float = 0.0
    reviews: int = 0
    colors: list[dict] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    category: str = ""
    age_group: str = ""
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert


@dataclass
class WishlistItem:
    """One saved product in a user's wishlist, joined with product details."""

    id: int
    product_id: int
    name: str
    price: float
    images: list[str] = field(default_factory=list)
