"""
Version information derived from package file names.

Package files are named with underscore-delimited segments:

    AppName_1.2.3.ipa              -> version "1.2.3"
    AppName_5.2b1_20.26.7.ipa      -> version "20.26.7", tweak version "5.2b1"

Segments are opaque strings: no numeric validation, no trimming and no
version comparison happens here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

PACKAGE_SUFFIX = ".ipa"


@dataclass(frozen=True)
class TwoPart:
    """`AppPart_version.ext`"""

    app_part: str
    version: str

    @property
    def tweak_version(self) -> Optional[str]:
        return None

    @property
    def description(self) -> str:
        return f"Version {self.version}"


@dataclass(frozen=True)
class ThreePart:
    """`AppPart_tweakVersion_version.ext`"""

    app_part: str
    tweak_version: str
    version: str

    @property
    def description(self) -> str:
        return f"Version {self.version} (tweak version: {self.tweak_version})"


@dataclass(frozen=True)
class Unrecognized:
    """A file name that matches none of the known shapes."""

    filename: str
    reason: str


ParsedVersion = Union[TwoPart, ThreePart]
ParseResult = Union[TwoPart, ThreePart, Unrecognized]


def parse_package_filename(filename: str, suffix: str = PACKAGE_SUFFIX) -> ParseResult:
    """
    Parse a package file's base name into a version descriptor.

    The suffix is matched case-insensitively. Names with a segment count
    other than two or three, or with an empty segment, are `Unrecognized`;
    callers skip such files instead of failing.
    """
    if not filename.lower().endswith(suffix.lower()):
        return Unrecognized(filename, f"does not end with {suffix}")

    stem = filename[: len(filename) - len(suffix)]
    parts = stem.split("_")

    if any(part == "" for part in parts):
        return Unrecognized(filename, "empty name segment")

    if len(parts) == 2:
        return TwoPart(app_part=parts[0], version=parts[1])
    if len(parts) == 3:
        return ThreePart(app_part=parts[0], tweak_version=parts[1], version=parts[2])

    return Unrecognized(filename, f"expected 2 or 3 name segments, found {len(parts)}")
