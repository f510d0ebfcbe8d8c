from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Query, Request, status

from altsource.core.settings import ServerSettings
from altsource.domain.models import RepositoryConfig
from altsource.services.authentication import AUTH_QUERY_PARAM, verify_access_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerContext:
    """
    Everything a request needs, built once at startup and never mutated.
    """

    settings: ServerSettings
    config: RepositoryConfig


def get_context(request: Request) -> ServerContext:
    context: Optional[ServerContext] = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Server is starting")
    return context


def require_access_token(
    request: Request,
    token: Optional[str] = Query(default=None, alias=AUTH_QUERY_PARAM),
) -> None:
    """
    Reject the request with 401 unless it carries the configured access token.
    """
    expected = get_context(request).settings.auth_token
    if verify_access_token(token, expected):
        return

    if token is None:
        logger.warning(f"Authentication token required but not provided for {request.url.path}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication token required")

    logger.warning(f"Invalid authentication token provided for {request.url.path}")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid authentication token")
