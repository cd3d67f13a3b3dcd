import base64
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from jwt.exceptions import PyJWTError

from vetcare.core.config import settings

PBKDF2_ALGORITHM = "sha256"
PBKDF2_ITERATIONS = 260_000
# Stored hashes asking for more rounds than this are refused
MAX_PBKDF2_ITERATIONS = 2_000_000

def get_password_hash(password: str, salt: Optional[bytes] = None) -> str:
    """Return ``pbkdf2_sha256$<iterations>$<salt>$<digest>`` for ``password``."""
    salt = salt or secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac(PBKDF2_ALGORITHM, password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return "$".join([
        f"pbkdf2_{PBKDF2_ALGORITHM}",
        str(PBKDF2_ITERATIONS),
        base64.b64encode(salt).decode("ascii"),
        base64.b64encode(digest).decode("ascii"),
    ])

def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        scheme, iterations, salt_b64, digest_b64 = password_hash.split("$")
        prefix, algorithm = scheme.split("_", 1)
        rounds = int(iterations)
        if prefix != "pbkdf2" or not 1 <= rounds <= MAX_PBKDF2_ITERATIONS:
            return False
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(digest_b64)
        # Unknown digests raise UnsupportedDigestmodError, a ValueError
        candidate = hashlib.pbkdf2_hmac(algorithm, password.encode("utf-8"), salt, rounds)
    except ValueError:
        return False
    return hmac.compare_digest(candidate, expected)

def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    to_encode["iat"] = now
    if expires_delta is not None:
        to_encode["exp"] = now + expires_delta
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decoded claims, or None for anything that is not a valid token."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except PyJWTError:
        return None
