"""
Authentication service - password verifiers and session tokens.

Tokens are HS256 JWTs over ``{ownerId, email, expiresAt}`` where
``expiresAt`` is epoch milliseconds. They are issued at registration;
this module does not implement a login flow.
"""

import base64
import hashlib
import os
import time

import jwt
import bcrypt as _bcrypt

SECRET_KEY = os.getenv(
    "TASKDESK_SECRET_KEY", "taskdesk-dev-secret-key-change-in-production"
)
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_HOURS = 24
BCRYPT_ROUNDS = int(os.getenv("TASKDESK_BCRYPT_ROUNDS", "12"))


def _prehash(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes of its input
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str) -> str:
    return _bcrypt.hashpw(_prehash(password),
                          _bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return _bcrypt.checkpw(_prehash(password), hashed.encode("utf-8"))
    except ValueError:
        # Not a bcrypt verifier
        return False


def create_access_token(user_id: int, email: str) -> str:
    expires_at = int(time.time() * 1000) + ACCESS_TOKEN_EXPIRE_HOURS * 3600 * 1000
    payload = {
        "ownerId": user_id,
        "email": email,
        "expiresAt": expires_at,
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> dict | None:
    """Return the claim carried by ``token``, or None if it is not one of ours.

    Expiry is reported, not enforced: callers compare ``expiresAt`` themselves
    (see ``is_expired``).
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.InvalidTokenError:
        return None
    owner_id = payload.get("ownerId")
    email = payload.get("email")
    expires_at = payload.get("expiresAt")
    if (
        not isinstance(owner_id, int) or isinstance(owner_id, bool)
        or not isinstance(email, str)
        or not isinstance(expires_at, int) or isinstance(expires_at, bool)
    ):
        return None
    return {"ownerId": owner_id, "email": email, "expiresAt": expires_at}


def is_expired(claim: dict, now_ms: int | None = None) -> bool:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return claim["expiresAt"] <= now_ms
