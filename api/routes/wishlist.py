"""
api/routes/wishlist.py -- Per-user wishlist endpoints.

Routes:
  GET    /api/wishlist               -- caller's saved products
  POST   /api/wishlist               -- save a product (idempotent)
  DELETE /api/wishlist/{product_id}  -- remove a saved product

Ownership comes from the token: every query is scoped to claims.user_id, so
one user can never read or modify another user's wishlist.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from api.models import SuccessResponse, WishlistAdd, WishlistItemResponse
from auth.dependencies import get_current_claims
from auth.models import TokenClaims
from catalog.store import CatalogStore

router = APIRouter(prefix="/wishlist")


@router.get("", response_model=list[WishlistItemResponse])
def list_wishlist(
    request: Request,
    claims: TokenClaims = Depends(get_current_claims),
) -> list[WishlistItemResponse]:
    catalog: CatalogStore = request.app.state.catalog
    return [WishlistItemResponse.from_item(i) for i in catalog.list_wishlist(claims.user_id)]


@router.post("", response_model=SuccessResponse)
def add_to_wishlist(
    request: Request,
    body: WishlistAdd,
    claims: TokenClaims = Depends(get_current_claims),
) -> SuccessResponse:
    """Save a product. Saving it again succeeds without creating a duplicate."""
    catalog: CatalogStore = request.app.state.catalog
    if catalog.get_product_by_id(body.product_id) is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "Product not found."},
        )
    catalog.add_to_wishlist(claims.user_id, body.product_id)
    return SuccessResponse()


@router.delete("/{product_id}", response_model=SuccessResponse)
def remove_from_wishlist(
    request: Request,
    product_id: int,
    claims: TokenClaims = Depends(get_current_claims),
) -> SuccessResponse:
    """Remove a saved product. Removing one that is not saved is not an error."""
    catalog: CatalogStore = request.app.state.catalog
    catalog.remove_from_wishlist(claims.user_id, product_id)
    return SuccessResponse()
