"""
api/routes/products.py -- Public catalog read endpoints.

Routes:
  GET /api/products               -- filtered, sorted listing
  GET /api/products/{id_or_slug}  -- single product by numeric id or slug

Query parameters for the listing (all optional):
  category, age_group -- exact match
  q                   -- case-insensitive substring of name or description
  sort                -- price_asc | price_desc | newest; unknown values fall
                         back to newest-by-id

Both routes are public. Filtering and ordering are delegated to
catalog/query.py through CatalogStore.list_products().
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from api.models import ProductResponse
from catalog.query import ProductFilters
from catalog.store import CatalogStore

router = APIRouter()


@router.get("/products", response_model=list[ProductResponse])
def list_products(
    request: Request,
    category: Optional[str] = Query(default=None, max_length=100),
    age_group: Optional[str] = Query(default=None, max_length=100),
    q: Optional[str] = Query(default=None, max_length=200),
    sort: Optional[str] = Query(default=None, max_length=30),
) -> list[ProductResponse]:
    """Return catalog products matching the optional filters."""
    catalog: CatalogStore = request.app.state.catalog
    filters = ProductFilters(category=category, age_group=age_group, q=q, sort=sort)
    return [ProductResponse.from_product(p) for p in catalog.list_products(filters)]


@router.get("/products/{key}", response_model=ProductResponse)
def get_product(request: Request, key: str) -> ProductResponse:
    """Return one product; key may be its numeric id or its slug."""
    catalog: CatalogStore = request.app.state.catalog
    product = catalog.get_product(key)
    if product is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "Product not found."},
        )
    return ProductResponse.from_product(product)
