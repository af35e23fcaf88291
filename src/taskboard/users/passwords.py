# src/taskboard/users/passwords.py

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets

logger = logging.getLogger(__name__)

_SCHEME = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 200_000


def hash_password(password: str, *, iterations: int = DEFAULT_ITERATIONS) -> str:
    """Return "pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>"."""
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, int(iterations))
    return f"{_SCHEME}${int(iterations)}${salt.hex()}${digest.hex()}"


def verify_password(password: str, record: str | None) -> bool:
    """
    Constant-time check of `password` against a stored hash record.

    Anything that is not a well-formed record (including a legacy plain-text
    value) never matches.
    """
    if not record:
        return False
    parts = record.split("$")
    if len(parts) != 4 or parts[0] != _SCHEME:
        logger.warning("Stored credential is not a %s record; refusing to compare.", _SCHEME)
        return False
    try:
        iterations = int(parts[1])
        salt = bytes.fromhex(parts[2])
        expected = bytes.fromhex(parts[3])
    except ValueError:
        logger.warning("Stored credential record is malformed.")
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(digest, expected)
