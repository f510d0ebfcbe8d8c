"""
Best-effort extraction of bundle metadata from `.ipa` archives.

An IPA is a zip archive laid out as `Payload/<Name>.app/Info.plist`. Only
the handful of keys needed to describe a version are read; nothing about the
archive is validated.
"""

from __future__ import annotations

import logging
import plistlib
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BundleInfo:
    bundle_identifier: str
    bundle_version: str
    bundle_short_version: Optional[str] = None
    bundle_name: Optional[str] = None


@dataclass(frozen=True)
class BundleVersion:
    """Version descriptor built from an app's Info.plist."""

    version: str
    build: str

    @property
    def tweak_version(self) -> Optional[str]:
        return None

    @property
    def description(self) -> str:
        if self.version != self.build:
            return f"Version {self.version} (build {self.build})"
        return f"Version {self.version}"

    @classmethod
    def from_bundle_info(cls, info: BundleInfo) -> "BundleVersion":
        # CFBundleShortVersionString is the user-facing version; CFBundleVersion is the build.
        return cls(
            version=info.bundle_short_version or info.bundle_version,
            build=info.bundle_version,
        )


def _find_info_plist(archive: zipfile.ZipFile) -> Optional[str]:
    for name in archive.namelist():
        parts = name.split("/")
        # Only the top-level app bundle; watch apps and extensions live deeper.
        if (
            len(parts) == 3
            and parts[0] == "Payload"
            and parts[1].endswith(".app")
            and parts[2] == "Info.plist"
        ):
            return name
    return None


def read_bundle_info(path: Path) -> Optional[BundleInfo]:
    """
    Read bundle metadata from the archive at `path`.

    Returns None when the file is not a readable archive, has no top-level
    Info.plist, or lacks CFBundleIdentifier / CFBundleVersion.
    """
    try:
        with zipfile.ZipFile(path) as archive:
            plist_name = _find_info_plist(archive)
            if plist_name is None:
                logger.debug(f"No Info.plist found in {path.name}")
                return None
            content = archive.read(plist_name)
    except (OSError, zipfile.BadZipFile, zlib.error, ValueError, RuntimeError) as e:
        logger.debug(f"Failed to read bundle metadata from {path.name}: {e}")
        return None

    try:
        info = plistlib.loads(content)
    except Exception as e:
        # Malformed values raise arbitrary exception types.
        logger.debug(f"Failed to parse Info.plist in {path.name}: {e}")
        return None

    if not isinstance(info, dict):
        return None

    identifier = info.get("CFBundleIdentifier")
    version = info.get("CFBundleVersion")
    if not isinstance(identifier, str) or not isinstance(version, str):
        logger.debug(f"Info.plist in {path.name} lacks CFBundleIdentifier or CFBundleVersion")
        return None

    short_version = info.get("CFBundleShortVersionString")
    name = info.get("CFBundleDisplayName") or info.get("CFBundleName")

    return BundleInfo(
        bundle_identifier=identifier,
        bundle_version=version,
        bundle_short_version=short_version if isinstance(short_version, str) else None,
        bundle_name=name if isinstance(name, str) else None,
    )
