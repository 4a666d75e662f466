"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Two-stage access guard:
  1. get_current_claims() -- requires "Authorization: Bearer <token>" and a
     token the TokenService accepts. Raises HTTP 401 otherwise.
  2. require_admin()      -- stacked on top of stage 1; raises HTTP 403 if
     the claims do not carry the admin flag.

Both run as dependencies, so a rejected request never reaches handler logic.
On success the validated TokenClaims are stored on request.state.claims and
returned to the handler. The guard is stateless: it trusts the signed claims
and does not read the users table.

Layer rule: no imports from catalog/. auth/dependencies.py may import from
fastapi because it is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.models import TokenClaims
from auth.tokens import TokenService

_BEARER_PREFIX = "Bearer "


def get_current_claims(request: Request) -> TokenClaims:
    """Require a valid bearer token. Raises HTTP 401 if the request is not authenticated.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(claims: TokenClaims = Depends(get_current_claims)): ...
    """
    auth_header = request.headers.get("Authorization", "")
    token = auth_header[len(_BEARER_PREFIX) :].strip() if auth_header.startswith(_BEARER_PREFIX) else ""
    if not token:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Authentication required."},
        )

    tokens: TokenService = request.app.state.tokens
    claims = tokens.decode_access_token(token)
    if claims is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "invalid_token", "message": "Invalid or expired token."},
        )
    request.state.claims = claims
    return claims


def require_admin(request: Request) -> TokenClaims:
    """Require the admin claim. Raises HTTP 401 if unauthenticated, HTTP 403 if not admin.

    Use as a FastAPI dependency:
        router = APIRouter(dependencies=[Depends(require_admin)])
    """
    claims = get_current_claims(request)
    if not claims.is_admin:
        raise HTTPException(
            status_code=403,
            detail={"code": "forbidden", "message": "Admin access required."},
        )
    return claims
