from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from altsource.core.dependencies import ServerContext, get_context, require_access_token
from altsource.domain.errors import NotFoundError
from altsource.domain.source_utils import is_valid_path_component
from altsource.services.downloads import find_package_file, resolve_download
from altsource.storage.discovery import DiscoveredFile

logger = logging.getLogger(__name__)
router = APIRouter()


def _file_response(file: DiscoveredFile) -> FileResponse:
    logger.info(f"Serving package {file.app_name}/{file.filename} ({file.size} bytes)")
    return FileResponse(
        path=str(file.path),
        filename=file.filename,
        media_type="application/octet-stream",
    )


# ---------------------------------------------------------------------------
# 1. Direct download: GET/HEAD /apps/{app_name}/{filename}
# ---------------------------------------------------------------------------

@router.api_route(
    "/apps/{app_name}/{filename}",
    methods=["GET", "HEAD"],
    dependencies=[Depends(require_access_token)],
)
def download_direct(
    app_name: str,
    filename: str,
    context: ServerContext = Depends(get_context),
) -> FileResponse:
    """
    Serve a package file by app and file name.

    Closed when a download secret is configured: files are then reachable
    only through their token URLs.
    """
    if context.settings.token_mode:
        logger.warning(f"Rejected direct download of {app_name}/{filename}: token downloads only")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Direct downloads are disabled")

    if not is_valid_path_component(app_name):
        logger.warning(f"Invalid app name: {app_name}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid app name: {app_name}")
    if not is_valid_path_component(filename):
        logger.warning(f"Invalid filename: {filename}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid filename: {filename}")

    try:
        file = find_package_file(context.config, context.settings.apps_dir, app_name, filename)
    except NotFoundError as e:
        logger.debug(str(e))
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return _file_response(file)


# ---------------------------------------------------------------------------
# 2. Token download: GET/HEAD /download/{token}
# ---------------------------------------------------------------------------

@router.api_route("/download/{token}", methods=["GET", "HEAD"])
def download_by_token(
    token: str,
    context: ServerContext = Depends(get_context),
) -> FileResponse:
    """
    Serve the package file a download token was derived from.

    The token is the credential, so the access token is not required here.
    """
    secret = context.settings.download_secret
    if not secret:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Token downloads are not enabled")

    try:
        file = resolve_download(context.config, context.settings.apps_dir, token, secret)
    except NotFoundError as e:
        logger.debug(f"Unresolved download token: {e}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Download not found")

    return _file_response(file)
