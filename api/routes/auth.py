"""
api/routes/auth.py -- Registration, login and identity endpoints.

Routes:
  POST /api/register  -- create a customer account; returns a bearer token
  POST /api/login     -- email/password login; returns a bearer token
  GET  /api/me        -- current user profile (requires auth)

Security:
  POST /login is rate-limited to 10 requests/minute per IP (brute force).
  authenticate_user() provides timing equalization -- use it, never inline.
  Wrong email and wrong password produce the same "bad_credentials" error.
  Cache-Control: no-store on every response that carries a token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter
from api.models import LoginRequest, MeResponse, RegisterRequest, TokenResponse, UserResponse
from auth.credentials import authenticate_user, register_user
from auth.dependencies import get_current_claims
from auth.models import TokenClaims, User
from auth.store import UserStore
from auth.tokens import TokenService

# Auth policy:
# - POST /api/register: public
# - POST /api/login:    public, 10/minute
# - GET  /api/me:       requires auth (get_current_claims)
router = APIRouter()


def _token_response(tokens: TokenService, user: User) -> JSONResponse:
    token = tokens.create_access_token(user.id, user.email, user.is_admin)
    resp = JSONResponse(status_code=200, content=TokenResponse(token=token).model_dump())
    resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post("/register", response_model=TokenResponse)
def register(request: Request, body: RegisterRequest) -> JSONResponse:
    """Create a customer account and return a token for it.

    New accounts are never admins; the only admin is the one created by
    bootstrap_admin() at startup.
    """
    user_store: UserStore = request.app.state.user_store
    user = register_user(user_store, body.name, body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=400,
            detail={"code": "conflict", "message": "Email already registered."},
        )
    return _token_response(request.app.state.tokens, user)


@limiter.limit("10/minute")  # must be ABOVE @router to preserve FastAPI introspection
@router.post("/login", response_model=TokenResponse)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password; return a fresh token."""
    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.email, body.password)
    if user is None:
        resp = JSONResponse(
            status_code=400,
            content={"error": {"code": "bad_credentials", "message": "Invalid email or password."}},
        )
        resp.headers["Cache-Control"] = "no-store"
        return resp
    return _token_response(request.app.state.tokens, user)


@router.get("/me", response_model=MeResponse)
def me(request: Request, claims: TokenClaims = Depends(get_current_claims)) -> MeResponse:
    """Return the stored profile for the token's user.

    A token may outlive its user row only if the database was reset; that
    case is reported as 404 rather than trusting the stale claims.
    """
    user_store: UserStore = request.app.state.user_store
    user = user_store.get_by_id(claims.user_id)
    if user is None:
        raise HTTPException(
            status_code=404,
            detail={"code": "not_found", "message": "User not found."},
        )
    return MeResponse(user=UserResponse.from_user(user))
