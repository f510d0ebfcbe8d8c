"""
Deterministic download tokens.

A token stands in for an (app, file) pair in download URLs when direct
paths must not be exposed. Tokens are derived with HMAC-SHA256 keyed by the
server's download secret, so they are stable across restarts and cannot be
computed or reversed without the secret. Nothing is stored: resolving a
token recomputes candidates and compares.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Iterable

from altsource.domain.errors import NotFoundError
from altsource.storage.discovery import DiscoveredFile

TOKEN_BYTES = 16


def derive_download_token(app_name: str, filename: str, secret: str) -> str:
    """
    Derive the download token for `filename` of `app_name`.

    The token is 16 bytes of HMAC-SHA256 rendered as unpadded URL-safe
    base64 (22 characters).
    """
    if not secret:
        raise ValueError("A download secret is required to derive download tokens")

    message = f"{app_name}\0{filename}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest[:TOKEN_BYTES]).rstrip(b"=").decode("ascii")


def resolve_download_token(
    token: str,
    candidates: Iterable[DiscoveredFile],
    secret: str,
) -> DiscoveredFile:
    """
    Return the first candidate whose derived token equals `token`.

    Raises:
        NotFoundError: If no candidate matches.
    """
    provided = token.encode("utf-8")
    for candidate in candidates:
        expected = derive_download_token(candidate.app_name, candidate.filename, secret)
        if hmac.compare_digest(expected.encode("ascii"), provided):
            return candidate
    raise NotFoundError("Unknown download token")
