"""
Discovery of package files on disk.

Each configured app owns one directory directly under the apps directory,
named exactly like the app. Only the immediate files of that directory are
considered; nested directories are ignored.
"""

from __future__ import annotations

import logging
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from altsource.domain.filename_parser import PACKAGE_SUFFIX
from altsource.storage.bundle_info import BundleInfo, read_bundle_info

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveredFile:
    """A package file found under an app's directory."""

    app_name: str
    filename: str
    path: Path
    size: int
    bundle_info: Optional[BundleInfo] = None


def scan_app_directory(
    apps_dir: Path,
    app_name: str,
    suffix: str = PACKAGE_SUFFIX,
    read_bundles: bool = True,
) -> List[DiscoveredFile]:
    """
    List the package files in `apps_dir / app_name`, sorted by file name.

    A missing app directory yields an empty list. Files that cannot be
    stat'ed are logged and skipped; files with another extension and hidden
    files are skipped silently.

    Raises:
        OSError: If the app directory exists but cannot be listed.
    """
    app_dir = apps_dir / app_name
    if not app_dir.is_dir():
        logger.warning(f"No package directory for app {app_name} ({app_dir})")
        return []

    discovered: List[DiscoveredFile] = []
    for entry in sorted(app_dir.iterdir(), key=lambda p: p.name):
        if entry.name.startswith("."):
            continue
        if not entry.name.lower().endswith(suffix.lower()):
            continue

        try:
            st = entry.stat()
        except OSError as e:
            logger.warning(f"Failed to read metadata for {app_name}/{entry.name}: {e}")
            continue

        if not stat.S_ISREG(st.st_mode):
            continue

        bundle_info = read_bundle_info(entry) if read_bundles else None

        logger.debug(f"Discovered package {app_name}/{entry.name} ({st.st_size} bytes)")
        discovered.append(
            DiscoveredFile(
                app_name=app_name,
                filename=entry.name,
                path=entry.absolute(),
                size=st.st_size,
                bundle_info=bundle_info,
            )
        )

    return discovered
