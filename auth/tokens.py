"""
auth/tokens.py -- JWT issuance/verification and password hashing.

Security design decisions:
  JWT: python-jose with HS256. Tokens are signed with the configured secret
       and carry exactly user_id, email, is_admin and exp. Verification
       returns None on any failure -- the access guard turns that into a 401.
       There is no revocation list: a token stays valid until its embedded
       expiry elapses.

  Passwords: bcrypt with cost factor 10 (roughly 100ms per hash on commodity
       hardware). The _DUMMY_HASH constant enables timing equalization in
       authenticate_user() so response time does not reveal whether an email
       is registered.

  Secret: TokenService is constructed once by the application lifespan from
       Settings and stored on app.state.tokens. Nothing here reads the
       environment, so tests build their own TokenService with a fixed key.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from auth.models import TokenClaims

logger = logging.getLogger("caprio.auth")

_ALGORITHM = "HS256"
_BCRYPT_ROUNDS = 10
_BCRYPT_MAX_BYTES = 72

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Raises ValueError if the UTF-8 encoding exceeds 72 bytes. bcrypt ignores
    everything past that point, so such a password cannot be stored safely.
    The API models reject it earlier with a 400.
    """
    encoded = plain.encode("utf-8")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        raise ValueError(f"password exceeds {_BCRYPT_MAX_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A password over 72 bytes never matches: hash_password() refuses to store
    one, so no stored hash can correspond to it.
    """
    encoded = plain.encode("utf-8")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash in storage.
        logger.warning("Stored password hash could not be parsed")
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("caprio_timing_dummy")


# ---------------------------------------------------------------------------
# Token service
# ---------------------------------------------------------------------------


class TokenService:
    """Issue and verify signed, time-limited access tokens.

    Usage:
        tokens = TokenService(settings.secret_key, settings.token_expire_seconds)
        token = tokens.create_access_token(user.id, user.email, user.is_admin)
        claims = tokens.decode_access_token(token)   # TokenClaims or None
    """

    def __init__(self, secret_key: str, expire_seconds: int) -> None:
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds

    def create_access_token(self, user_id: int, email: str, is_admin: bool, expire_seconds: int = 0) -> str:
        """Encode a signed JWT carrying the caller's identity.

        Args:
            user_id:        Numeric user ID stored in the DB.
            email:          Normalized email of the user.
            is_admin:       Admin flag checked by require_admin().
            expire_seconds: Token lifetime in seconds. If 0 (default), uses
                            the lifetime this service was constructed with.
        """
        duration = expire_seconds if expire_seconds > 0 else self.expire_seconds
        expire = datetime.now(timezone.utc) + timedelta(seconds=duration)
        payload = {
            "user_id": user_id,
            "email": email,
            "is_admin": bool(is_admin),
            "exp": expire,
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def decode_access_token(self, token: str) -> TokenClaims | None:
        """Verify a JWT and return its claims, or None on any failure.

        Failure covers a malformed token, a bad signature, an elapsed expiry,
        and a payload whose claims are missing or have the wrong type.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except JWTError:
            return None
        return _claims_from_payload(payload)


def _claims_from_payload(payload: dict) -> TokenClaims | None:
    user_id = payload.get("user_id")
    email = payload.get("email")
    is_admin = payload.get("is_admin")
    exp = payload.get("exp")
    # bool is a subclass of int; a boolean user_id is a forged payload.
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return None
    if not isinstance(email, str) or not isinstance(is_admin, bool):
        return None
    if not isinstance(exp, (int, float)):
        return None
    return TokenClaims(
        user_id=user_id,
        email=email,
        is_admin=is_admin,
        expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
    )
