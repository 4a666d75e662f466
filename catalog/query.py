"""
catalog/query.py -- Parameterized SQL for filtered product listings.

build_product_query() turns a ProductFilters object into (sql_text, params)
for sqlalchemy.text(). The only dynamic parts of the SQL text are fixed
fragments chosen from this module's constants; every caller-supplied value
travels as a named bound parameter. This keeps the listing endpoint free of
SQL injection no matter what the query string contains.

Filter semantics:
  category, age_group -- exact match
  q                   -- literal substring of name OR description; SQLite LIKE
                         folds ASCII case only, so "hood" finds "HOOD" and
                         "École" finds "École"
  sort                -- price_asc | price_desc | newest; anything else falls
                         back to newest-by-id (id DESC) without an error

Falsy filter values (None, "") are treated as absent and add no condition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger("caprio.catalog")

PRODUCT_COLUMNS = (
    "id, name, slug, description, price, rating, reviews, colors, images, category, age_group, created_at"
)

_DEFAULT_ORDER = "id DESC"

_ORDER_BY: dict[str, str] = {
    "price_asc": "price ASC, id DESC",
    "price_desc": "price DESC, id DESC",
    "newest": "created_at DESC, id DESC",
}

# Backslash is the LIKE escape character; see _like_pattern().
_SEARCH_CLAUSE = "(name LIKE :q ESCAPE '\\' OR description LIKE :q ESCAPE '\\')"


@dataclass(frozen=True)
class ProductFilters:
    category: Optional[str] = None
    age_group: Optional[str] = None
    q: Optional[str] = None
    sort: Optional[str] = None


def _like_pattern(term: str) -> str:
    """Return a LIKE pattern matching term as a literal substring."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_product_query(filters: ProductFilters) -> tuple[str, dict[str, str]]:
    """Return (sql_text, params) selecting the products that match filters.

    Conditions are joined with AND. The ORDER BY clause is looked up in
    _ORDER_BY; unknown sort values use _DEFAULT_ORDER.
    """
    conditions: list[str] = []
    params: dict[str, str] = {}

    if filters.category:
        conditions.append("category = :category")
        params["category"] = filters.category
    if filters.age_group:
        conditions.append("age_group = :age_group")
        params["age_group"] = filters.age_group
    if filters.q:
        conditions.append(_SEARCH_CLAUSE)
        params["q"] = _like_pattern(filters.q)

    sql = f"SELECT {PRODUCT_COLUMNS} FROM products"
    if conditions:
        sql += " WHERE " + " AND ".join(conditions)

    order = _ORDER_BY.get(filters.sort or "")
    if order is None:
        if filters.sort:
            logger.debug("Unknown sort %r, using default order", filters.sort)
        order = _DEFAULT_ORDER
    sql += f" ORDER BY {order}"
    return sql, params
