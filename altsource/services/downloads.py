"""
Lookup of package files for download requests.

Only apps present in the configuration are served. Every lookup rescans
the app's directory so that downloads always reflect the current disk state.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List

from altsource.domain.errors import NotFoundError
from altsource.domain.models import RepositoryConfig
from altsource.domain.tokens import resolve_download_token
from altsource.storage.discovery import DiscoveredFile, scan_app_directory

logger = logging.getLogger(__name__)


def _scan(apps_dir: Path, app_name: str) -> List[DiscoveredFile]:
    try:
        return scan_app_directory(apps_dir, app_name, read_bundles=False)
    except OSError as e:
        logger.warning(f"Failed to scan package directory for {app_name}: {e}")
        return []


def find_package_file(
    config: RepositoryConfig,
    apps_dir: Path,
    app_name: str,
    filename: str,
) -> DiscoveredFile:
    """
    Find `filename` among the package files of the configured app `app_name`.

    Raises:
        NotFoundError: If the app is not configured or the file is not present.
    """
    app = config.get_app(app_name)
    for file in _scan(apps_dir, app.name):
        if file.filename == filename:
            return file
    raise NotFoundError(f"Package file not found: {app_name}/{filename}")


def iter_package_files(config: RepositoryConfig, apps_dir: Path) -> Iterator[DiscoveredFile]:
    """Yield the package files of every configured app, app by app."""
    for app in config.apps:
        yield from _scan(apps_dir, app.name)


def resolve_download(
    config: RepositoryConfig,
    apps_dir: Path,
    token: str,
    secret: str,
) -> DiscoveredFile:
    """
    Resolve a download token to the package file it was derived from.

    Raises:
        NotFoundError: If no current package file matches the token.
    """
    return resolve_download_token(token, iter_package_files(config, apps_dir), secret)
