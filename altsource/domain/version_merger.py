"""
Reconciliation of authored version records with discovered package files.

Authored records own the prose (description, date); discovered files own
the physical facts (download URL, size). A version only appears in the
result when a package file for it exists on disk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from altsource.domain.filename_parser import ParsedVersion
from altsource.domain.models import MergedVersion, VersionRecord
from altsource.storage.bundle_info import BundleVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveredVersion:
    """A package file on disk together with the version it was identified as."""

    parsed: Union[ParsedVersion, BundleVersion]
    size: int
    filename: str


def merge_versions(
    manual_versions: Sequence[VersionRecord],
    discovered: Iterable[DiscoveredVersion],
    download_url_for: Callable[[str], str],
    processing_date: Optional[str] = None,
) -> List[MergedVersion]:
    """
    Merge authored version records with discovered package files.

    Args:
        manual_versions: Authored records; on duplicate version strings the
            last record wins.
        discovered: Discovered files in discovery order.
        download_url_for: Builds the download URL for a file name.
        processing_date: Date for versions without an authored date.
            Defaults to today.

    Returns:
        One entry per distinct discovered version, in discovery order.
        Authored records without a matching file are dropped.
    """
    today = processing_date or date.today().isoformat()
    manual_index: Dict[str, VersionRecord] = {record.version: record for record in manual_versions}

    merged: Dict[str, MergedVersion] = {}
    for item in discovered:
        version = item.parsed.version
        download_url = download_url_for(item.filename)
        record = manual_index.get(version)

        if record is not None:
            entry = MergedVersion(
                **(record.model_extra or {}),
                version=version,
                date=record.date or today,
                localized_description=record.localized_description or item.parsed.description,
                download_url=download_url,
                size=item.size,
            )
            logger.debug(f"Merged version {version}: kept authored metadata, took URL and size from {item.filename}")
        else:
            entry = MergedVersion(
                version=version,
                date=today,
                localized_description=item.parsed.description,
                download_url=download_url,
                size=item.size,
            )
            logger.debug(f"Added discovered version {version} from {item.filename}")

        if version in merged:
            # Keeps the first position; the later file's facts replace the earlier ones.
            logger.warning(f"Version {version} provided by more than one file; using {item.filename}")
        merged[version] = entry

    for version in manual_index:
        if version not in merged:
            logger.debug(f"Dropping version {version}: no package file on disk")

    return list(merged.values())
