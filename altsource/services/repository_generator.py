"""
Generation of the repository manifest.

The manifest is rebuilt from scratch on every request: the authored
configuration is combined with whatever package files are on disk right now.
Nothing is cached between requests.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, List, Optional

from altsource.domain.filename_parser import Unrecognized, parse_package_filename
from altsource.domain.models import AppConfig, AppManifest, RepositoryConfig, RepositoryManifest
from altsource.domain.source_utils import join_url, strip_nulls
from altsource.domain.tokens import derive_download_token
from altsource.domain.version_merger import DiscoveredVersion, merge_versions
from altsource.storage.bundle_info import BundleVersion
from altsource.storage.discovery import DiscoveredFile, scan_app_directory

logger = logging.getLogger(__name__)


def build_download_url(
    external_base_url: str,
    app_name: str,
    filename: str,
    secret: Optional[str] = None,
) -> str:
    """
    Public download URL for a package file.

    With a secret: `{base}/download/{token}`; otherwise `{base}/apps/{app}/{file}`.
    """
    if secret:
        return join_url(external_base_url, "download", derive_download_token(app_name, filename, secret))
    return join_url(external_base_url, "apps", app_name, filename)


def identify_version(file: DiscoveredFile) -> Optional[DiscoveredVersion]:
    """
    Decide which version a package file provides.

    Bundle metadata from the archive wins; otherwise the file name is parsed.
    Returns None for files that cannot be identified.
    """
    if file.bundle_info is not None:
        parsed = BundleVersion.from_bundle_info(file.bundle_info)
    else:
        result = parse_package_filename(file.filename)
        if isinstance(result, Unrecognized):
            logger.warning(f"Skipping {file.app_name}/{file.filename}: {result.reason}")
            return None
        parsed = result

    return DiscoveredVersion(parsed=parsed, size=file.size, filename=file.filename)


def _url_builder(external_base_url: str, app_name: str, secret: Optional[str]) -> Callable[[str], str]:
    def build(filename: str) -> str:
        return build_download_url(external_base_url, app_name, filename, secret)

    return build


def generate_app(
    app: AppConfig,
    apps_dir: Path,
    external_base_url: str,
    secret: Optional[str] = None,
    processing_date: Optional[str] = None,
) -> AppManifest:
    """
    Resolve one app's versions against its package directory.

    Directory listing failures leave the app with no versions instead of failing.
    """
    try:
        files = scan_app_directory(apps_dir, app.name)
    except OSError as e:
        logger.warning(f"Failed to scan package directory for {app.name}: {e}")
        files = []

    discovered: List[DiscoveredVersion] = []
    for file in files:
        identified = identify_version(file)
        if identified is not None:
            discovered.append(identified)

    versions = merge_versions(
        app.versions,
        discovered,
        _url_builder(external_base_url, app.name, secret),
        processing_date=processing_date,
    )
    logger.debug(f"App {app.name}: {len(files)} package files, {len(versions)} versions")

    return AppManifest(**app.model_dump(by_alias=True, exclude={"versions"}), versions=versions)


def generate_repository(
    config: RepositoryConfig,
    apps_dir: Path,
    external_base_url: str,
    secret: Optional[str] = None,
    processing_date: Optional[str] = None,
) -> RepositoryManifest:
    """
    Build the repository manifest for `config` from the files under `apps_dir`.

    Args:
        config: The authored repository configuration.
        apps_dir: Directory holding one package directory per app.
        external_base_url: Public base URL for download links.
        secret: Download secret; when set, download URLs are token URLs.
        processing_date: Date used for versions without an authored date.

    Returns:
        The manifest, with apps in configuration order. An app whose
        versions cannot be resolved is emitted with no versions.
    """
    apps: List[AppManifest] = []
    for app in config.apps:
        try:
            apps.append(generate_app(app, apps_dir, external_base_url, secret, processing_date))
        except Exception as e:
            logger.error(f"Failed to resolve versions for {app.name}: {e}", exc_info=True)
            apps.append(AppManifest(**app.model_dump(by_alias=True, exclude={"versions"}), versions=[]))
    return RepositoryManifest(**config.model_dump(by_alias=True, exclude={"apps"}), apps=apps)


def render_manifest(manifest: RepositoryManifest) -> str:
    """Serialize a manifest as pretty-printed JSON with null fields removed."""
    data = strip_nulls(manifest.model_dump(by_alias=True, mode="json"))
    return json.dumps(data, indent=2, ensure_ascii=False)
