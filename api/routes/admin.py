"""
api/routes/admin.py -- Catalog management endpoints (admin only).

Routes:
  POST   /api/admin/products        -- create product; returns {id}
  PUT    /api/admin/products/{id}   -- replace editable fields; {success: true}
  DELETE /api/admin/products/{id}   -- delete product and its wishlist entries
  POST   /api/admin/seed-demo       -- idempotently insert the demo catalog

Every route sits behind the router-level require_admin dependency: a missing
or invalid token is rejected with 401, a valid non-admin token with 403,
before the handler body runs.
"""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError

from api.models import IdResponse, ProductCreate, SeedResponse, SuccessResponse
from auth.dependencies import require_admin
from catalog.store import CatalogStore

router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


def _slug_conflict() -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"code": "conflict", "message": "A product with that slug already exists."},
    )


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=404,
        detail={"code": "not_found", "message": "Product not found."},
    )


@router.post("/products", response_model=IdResponse)
def create_product(request: Request, body: ProductCreate) -> IdResponse:
    catalog: CatalogStore = request.app.state.catalog
    try:
        product_id = catalog.create_product(body.to_product())
    except IntegrityError as exc:
        raise _slug_conflict() from exc
    return IdResponse(id=product_id)


@router.put("/products/{product_id}", response_model=SuccessResponse)
def update_product(request: Request, product_id: int, body: ProductCreate) -> SuccessResponse:
    """Replace a product's editable fields. 404 if the id is unknown."""
    catalog: CatalogStore = request.app.state.catalog
    try:
        updated = catalog.update_product(product_id, **body.update_fields())
    except IntegrityError as exc:
        raise _slug_conflict() from exc
    if not updated:
        raise _not_found()
    return SuccessResponse()


@router.delete("/products/{product_id}", response_model=SuccessResponse)
def delete_product(request: Request, product_id: int) -> SuccessResponse:
    catalog: CatalogStore = request.app.state.catalog
    if not catalog.delete_product(product_id):
        raise _not_found()
    return SuccessResponse()


@router.post("/seed-demo", response_model=SeedResponse)
def seed_demo(request: Request) -> SeedResponse:
    """Insert the fixed demo products. Repeat calls insert nothing new."""
    catalog: CatalogStore = request.app.state.catalog
    return SeedResponse(inserted=catalog.seed_demo())
