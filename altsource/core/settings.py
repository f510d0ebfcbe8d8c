from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_LISTEN_PORT = 8080
DEFAULT_APPS_DIR = Path("apps")
DEFAULT_CONFIG_PATH = Path("config.json")


class ServerSettings(BaseModel):
    """
    Process-wide server settings, fixed at startup.

    `download_secret` is the mode switch for downloads: when set, manifests
    carry token URLs and the direct file route is closed; when unset,
    manifests carry direct URLs and the token route is disabled.
    """

    model_config = ConfigDict(frozen=True)

    listen_host: str = Field(default=DEFAULT_LISTEN_HOST)
    listen_port: int = Field(default=DEFAULT_LISTEN_PORT)
    external_base_url: Optional[str] = Field(
        default=None,
        description="Public base URL used in download links. Defaults to http://<host>:<port>.",
    )
    apps_dir: Path = Field(default=DEFAULT_APPS_DIR)
    config_path: Path = Field(default=DEFAULT_CONFIG_PATH)
    auth_token: Optional[str] = Field(
        default=None,
        description="If set, required as ?token= on every route except token downloads and /health.",
        repr=False,
    )
    download_secret: Optional[str] = Field(
        default=None,
        description="If set, download URLs are replaced with deterministic tokens.",
        repr=False,
    )

    @property
    def base_url(self) -> str:
        if self.external_base_url:
            return self.external_base_url.rstrip("/")
        return f"http://{self.listen_host}:{self.listen_port}"

    @property
    def token_mode(self) -> bool:
        return bool(self.download_secret)
