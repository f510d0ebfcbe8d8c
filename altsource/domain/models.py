"""
Pydantic models for the AltSource repository server.

This module defines the data models shared by the configuration loader,
the repository generator and the HTTP layer:
- Repository configuration (the authored `config.json` / `config.yaml`)
- App metadata and manually authored version records
- The generated repository manifest served to clients

Field names are snake_case in Python and camelCase on the wire; every model
accepts both spellings when validating. Unknown keys are kept so that
client-specific metadata authored in the config passes through unchanged.
"""

from __future__ import annotations

import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from altsource.domain.errors import NotFoundError


_MODEL_CONFIG = ConfigDict(populate_by_name=True, frozen=True, extra="allow")


def _scalar_to_str(value: Any) -> Any:
    """
    Coerce YAML scalars that were resolved to dates or numbers back to text.

    `date: 2024-01-01` loads as a date and `version: 1.0` as a float.
    """
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# ---------------------------------------------------------------------------
# Version Models
# ---------------------------------------------------------------------------


class VersionRecord(BaseModel):
    """
    A manually authored version entry from the repository configuration.

    Download URL and size are usually left out: they are filled in from the
    package file on disk whose parsed version matches `version`.
    """

    model_config = _MODEL_CONFIG

    version: str = Field(
        description="Version string; the merge key against discovered packages.",
    )
    date: Optional[str] = Field(
        default=None,
        description="Release date (e.g. '2024-01-01').",
    )
    localized_description: Optional[str] = Field(
        default=None,
        alias="localizedDescription",
        description="Human-written release notes for this version.",
    )
    download_url: Optional[str] = Field(
        default=None,
        alias="downloadURL",
        description="Ignored when serving; the URL always comes from the discovered file.",
    )
    size: Optional[int] = Field(
        default=None,
        description="Ignored when serving; the size always comes from the discovered file.",
    )

    @field_validator("version", "date", mode="before")
    @classmethod
    def _coerce_scalars(cls, v: Any) -> Any:
        return _scalar_to_str(v)


class MergedVersion(BaseModel):
    """
    A version entry as emitted in the generated manifest.

    Prose (description, date) comes from the authored record when one exists;
    physical facts (download URL, size) always come from the file on disk.
    """

    model_config = _MODEL_CONFIG

    version: str
    date: str
    localized_description: str = Field(alias="localizedDescription")
    download_url: str = Field(alias="downloadURL")
    size: int


# ---------------------------------------------------------------------------
# App Models
# ---------------------------------------------------------------------------


class AppPermissions(BaseModel):
    """Entitlements and privacy usage strings declared by an app."""

    model_config = _MODEL_CONFIG

    entitlements: List[str] = Field(default_factory=list)
    privacy: Dict[str, str] = Field(default_factory=dict)


class AppMetadata(BaseModel):
    """
    Static metadata for one distributable app.

    `name` doubles as the name of the app's package directory under the
    apps directory.
    """

    model_config = _MODEL_CONFIG

    name: str = Field(
        description="Display name; must match the app's directory name on disk.",
    )
    bundle_identifier: str = Field(
        alias="bundleIdentifier",
        description="Bundle identifier, e.g. 'com.example.app'.",
    )
    developer_name: Optional[str] = Field(default=None, alias="developerName")
    subtitle: Optional[str] = None
    localized_description: Optional[str] = Field(default=None, alias="localizedDescription")
    icon_url: Optional[str] = Field(default=None, alias="iconURL")
    tint_color: Optional[str] = Field(default=None, alias="tintColor")
    category: Optional[str] = None
    screenshot_urls: List[str] = Field(default_factory=list, alias="screenshotURLs")
    app_permissions: Optional[AppPermissions] = Field(default=None, alias="appPermissions")
    beta: Optional[bool] = None


class AppConfig(AppMetadata):
    """App entry as authored in the configuration."""

    versions: List[VersionRecord] = Field(
        default_factory=list,
        description="Manually authored versions; may be empty.",
    )


class AppManifest(AppMetadata):
    """App entry as served, with versions resolved against the disk."""

    versions: List[MergedVersion] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Repository Models
# ---------------------------------------------------------------------------


class NewsItem(BaseModel):
    """A news entry shown by clients on the source's news feed."""

    model_config = _MODEL_CONFIG

    identifier: str
    title: str
    caption: Optional[str] = None
    date: Optional[str] = None
    app_id: Optional[str] = Field(default=None, alias="appID")
    notify: bool = False
    tint_color: Optional[str] = Field(default=None, alias="tintColor")
    image_url: Optional[str] = Field(default=None, alias="imageURL")
    url: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, v: Any) -> Any:
        return _scalar_to_str(v)


class RepositoryMetadata(BaseModel):
    """Top-level repository fields shared by the config and the manifest."""

    model_config = _MODEL_CONFIG

    name: str
    identifier: str
    source_url: Optional[str] = Field(default=None, alias="sourceURL")
    website: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    icon_url: Optional[str] = Field(default=None, alias="iconURL")
    tint_color: Optional[str] = Field(default=None, alias="tintColor")
    news: List[NewsItem] = Field(default_factory=list)
    user_info: Dict[str, Any] = Field(default_factory=dict, alias="userInfo")


class RepositoryConfig(RepositoryMetadata):
    """
    The authored repository configuration.

    Loaded once at startup and never mutated afterwards.
    """

    apps: List[AppConfig] = Field(default_factory=list)

    def get_app(self, name: str) -> AppConfig:
        """
        Return the configured app whose name (and directory) is `name`.

        Raises:
            NotFoundError: If no app with that name is configured.
        """
        for app in self.apps:
            if app.name == name:
                return app
        raise NotFoundError(f"App not found: {name}")


class RepositoryManifest(RepositoryMetadata):
    """The generated manifest served as `repository.json`."""

    apps: List[AppManifest] = Field(default_factory=list)
