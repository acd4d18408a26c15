"""
Per-request bearer tokens.

Every request carries a JWT signed with the service's secret. The token is
issued by the service id and stamped with the time it was created; there is no
expiry claim, so a fresh token is signed for each request.

``iat`` is fractional and strictly increasing within the process, so no two
tokens signed here share a claim set, even from concurrent threads.
"""

import threading
import time

import jwt

from .errors import SigningError

ALGORITHM = "HS256"

_clock_lock = threading.Lock()
_last_issued = 0.0


def issued_at() -> float:
    """Current unix time in microseconds, never equal to a previous result"""
    global _last_issued
    with _clock_lock:
        now = round(time.time(), 6)
        if now <= _last_issued:
            now = round(_last_issued + 0.000001, 6)
        _last_issued = now
        return now


def sign_token(service_id: str, secret: str) -> str:
    """
    Create a compact HS256 JWT for a single request.

    Raises:
        SigningError: if the token cannot be signed
    """
    if not isinstance(secret, str) or not secret:
        raise SigningError("signing secret is empty")

    claims = {
        "iss": service_id,
        "iat": issued_at(),
    }

    try:
        return jwt.encode(claims, secret, algorithm=ALGORITHM, headers={"typ": "JWT"})
    except (jwt.PyJWTError, TypeError, ValueError) as e:
        raise SigningError(f"failed to sign token: {e}") from e
