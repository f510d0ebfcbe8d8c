from __future__ import annotations

import secrets
from typing import Optional

AUTH_QUERY_PARAM = "token"


def verify_access_token(provided: Optional[str], expected: Optional[str]) -> bool:
    """
    Check a client-supplied access token against the configured one.

    Access is open when no token is configured.
    """
    if not expected:
        return True
    if provided is None:
        return False
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))
