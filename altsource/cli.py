"""CLI entry point: altsource.

Subcommands:
    altsource serve                       # Run the repository server
    altsource check                       # Validate config.json and print the manifest

Every option can also be set through the environment variable shown in
--help; a `.env` file in the working directory is loaded first.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from altsource.core.settings import (
    DEFAULT_APPS_DIR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_LISTEN_HOST,
    DEFAULT_LISTEN_PORT,
    ServerSettings,
)
from altsource.data.config_loader import load_repository_config
from altsource.domain.errors import ConfigurationError
from altsource.domain.models import RepositoryConfig
from altsource.main import configure_logging, create_app
from altsource.services.repository_generator import generate_repository, render_manifest

logger = logging.getLogger(__name__)


def _resolve(path: Path) -> Path:
    return path if path.is_absolute() else Path.cwd() / path


def _load_config(path: Path) -> RepositoryConfig:
    try:
        return asyncio.run(load_repository_config(path))
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


def _common_options(func):
    func = click.option(
        "--download-secret",
        envvar="DOWNLOAD_SECRET",
        default=None,
        help="Secret for token download URLs; enables token mode.",
    )(func)
    func = click.option(
        "--external-base-url",
        envvar="EXTERNAL_BASE_URL",
        default=None,
        help="Public base URL for download links (default: http://<listen-url>:<listen-port>).",
    )(func)
    func = click.option(
        "--config",
        "config_path",
        envvar="CONFIG_PATH",
        type=click.Path(path_type=Path),
        default=DEFAULT_CONFIG_PATH,
        show_default=True,
        help="Repository configuration file (JSON or YAML).",
    )(func)
    func = click.option(
        "--apps-dir",
        envvar="APPS_DIR",
        type=click.Path(path_type=Path),
        default=DEFAULT_APPS_DIR,
        show_default=True,
        help="Directory with one package directory per app.",
    )(func)
    return func


@click.group()
@click.option("--log-level", envvar="LOG_LEVEL", default="INFO", show_default=True, help="Logging level")
def cli(log_level: str) -> None:
    """AltStore-compatible repository server."""
    configure_logging(log_level)


@cli.command("serve")
@click.option("--listen-url", envvar="LISTEN_URL", default=DEFAULT_LISTEN_HOST, show_default=True, help="Listen address")
@click.option("--listen-port", envvar="LISTEN_PORT", type=int, default=DEFAULT_LISTEN_PORT, show_default=True, help="Listen port")
@click.option("--auth-token", envvar="AUTH_TOKEN", default=None, help="Access token required as ?token= query parameter.")
@_common_options
def serve(
    listen_url: str,
    listen_port: int,
    auth_token: Optional[str],
    apps_dir: Path,
    config_path: Path,
    external_base_url: Optional[str],
    download_secret: Optional[str],
) -> None:
    """Run the repository server."""
    import uvicorn

    settings = ServerSettings(
        listen_host=listen_url,
        listen_port=listen_port,
        external_base_url=external_base_url,
        apps_dir=_resolve(apps_dir),
        config_path=_resolve(config_path),
        auth_token=auth_token or None,
        download_secret=download_secret or None,
    )
    config = _load_config(settings.config_path)

    logger.info("Starting AltSource repository server")
    app = create_app(settings, config)
    uvicorn.run(app, host=settings.listen_host, port=settings.listen_port, log_config=None)


@cli.command("check")
@_common_options
def check(
    apps_dir: Path,
    config_path: Path,
    external_base_url: Optional[str],
    download_secret: Optional[str],
) -> None:
    """Validate the configuration and print the manifest that would be served."""
    settings = ServerSettings(
        external_base_url=external_base_url,
        apps_dir=_resolve(apps_dir),
        config_path=_resolve(config_path),
        download_secret=download_secret or None,
    )
    config = _load_config(settings.config_path)
    manifest = generate_repository(
        config,
        settings.apps_dir,
        settings.base_url,
        secret=settings.download_secret,
    )
    click.echo(render_manifest(manifest))


def main() -> None:
    load_dotenv(Path.cwd() / ".env")
    cli()
