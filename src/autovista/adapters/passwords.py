from __future__ import annotations

import base64
import hashlib
import hmac
import secrets

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 260_000


def hash_password(plain: str, *, iterations: int = ITERATIONS) -> str:
    # Stored as: pbkdf2_sha256$<iterations>$<salt>$<digest>
    salt = secrets.token_urlsafe(16)
    digest = hashlib.pbkdf2_hmac("sha256", plain.encode("utf-8"), salt.encode("utf-8"), iterations)
    encoded = base64.b64encode(digest).decode("ascii")
    return f"{ALGORITHM}${iterations}${salt}${encoded}"


def verify_password(plain: str, stored: str) -> bool:
    try:
        algorithm, iterations, salt, encoded = stored.split("$")
    except ValueError:
        return False
    if algorithm != ALGORITHM:
        return False

    digest = hashlib.pbkdf2_hmac(
        "sha256", plain.encode("utf-8"), salt.encode("utf-8"), int(iterations)
    )
    return hmac.compare_digest(base64.b64encode(digest).decode("ascii"), encoded)


def new_session_token() -> str:
    return secrets.token_urlsafe(32)
