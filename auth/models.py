"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in catalog/models.py -- dataclasses own domain shape; stores and routes do
the work.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """A registered customer or administrator.

    email is stored normalized (stripped, lower-cased); see
    auth.credentials.normalize_email. hashed_password is a bcrypt hash and
    is never serialized into an API response.
    """

    email: str
    hashed_password: str
    name: str = ""
    is_admin: bool = False
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Identity facts carried inside a signed access token.

    Exists only for the lifetime of the token; never persisted.
    """

    user_id: int
    email: str
    is_admin: bool
    expires_at: datetime
