"""
auth/credentials.py -- Registration, login and admin bootstrap.

These functions compose UserStore with the bcrypt helpers in auth/tokens.py.
Expected outcomes are return values, not exceptions:

  register_user()     -> User, or None when the email is already registered
  authenticate_user() -> User, or None for unknown email / wrong password
  bootstrap_admin()   -> True when the admin row was created, False if present

Emails are normalized (stripped, lower-cased) before every write and lookup,
so "Alice@X.com" and "alice@x.com" are the same account.

Layer rule: no imports from api/ or catalog/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.models import User
from auth.store import UserStore
from auth.tokens import _DUMMY_HASH, hash_password, verify_password

logger = logging.getLogger("caprio.auth")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def register_user(store: UserStore, name: str, email: str, password: str) -> User | None:
    """Create a customer account. Returns None if the email is taken.

    The pre-insert lookup avoids paying for bcrypt on an obvious duplicate.
    Two concurrent registrations for the same email can both pass it; the
    UNIQUE index then rejects the second insert with IntegrityError, which is
    reported the same way.
    """
    email = normalize_email(email)
    if store.get_by_email(email) is not None:
        return None
    user = User(email=email, name=name, hashed_password=hash_password(password))
    try:
        user.id = store.create_user(user)
    except IntegrityError:
        logger.info("Concurrent registration rejected for %s", email)
        return None
    return store.get_by_id(user.id)


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Authenticate an email/password login with timing equalization.

    Always runs bcrypt whether or not the user exists:
    - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Returns the User on success, None on any failure.
    """
    user = store.get_by_email(normalize_email(email))
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def bootstrap_admin(store: UserStore, email: str, password: str) -> bool:
    """Ensure an admin account exists for the configured email.

    Called once from the application lifespan on every startup. Idempotent:
    a restart with the same configuration finds the existing row and creates
    nothing. The existence check and the insert are not atomic; a racing
    second bootstrap loses on the UNIQUE index and is treated as "present".
    """
    email = normalize_email(email)
    if store.count_users(email):
        return False
    admin = User(email=email, name="Admin", hashed_password=hash_password(password), is_admin=True)
    try:
        store.create_user(admin)
    except IntegrityError:
        return False
    logger.info("Admin user created: %s", email)
    return True
