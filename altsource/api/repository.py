from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from altsource.core.dependencies import ServerContext, get_context, require_access_token
from altsource.services.repository_generator import generate_repository, render_manifest

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_access_token)])


# ---------------------------------------------------------------------------
# GET/HEAD / and /repository.json
# ---------------------------------------------------------------------------

@router.api_route("/", methods=["GET", "HEAD"])
@router.api_route("/repository.json", methods=["GET", "HEAD"])
def get_repository(context: ServerContext = Depends(get_context)) -> Response:
    """
    Generate the repository manifest from the configuration and the current
    contents of the apps directory.
    """
    settings = context.settings
    manifest = generate_repository(
        context.config,
        settings.apps_dir,
        settings.base_url,
        secret=settings.download_secret,
    )

    content = render_manifest(manifest)
    logger.debug(f"Generated repository.json ({len(content)} bytes)")

    return Response(content=content, media_type="application/json")
