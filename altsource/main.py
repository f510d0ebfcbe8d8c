import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from altsource import __version__
from altsource.api.downloads import router as downloads_router
from altsource.api.repository import router as repository_router
from altsource.core.dependencies import ServerContext
from altsource.core.settings import ServerSettings
from altsource.data.config_loader import load_repository_config
from altsource.domain.models import RepositoryConfig

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging for the server process.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Per-request access lines only when debugging
    if log_level > logging.DEBUG:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def _log_settings(settings: ServerSettings) -> None:
    # Secrets are reported as enabled/disabled only.
    logger.info("Configuration:")
    logger.info(f"  Listen: {settings.listen_host}:{settings.listen_port}")
    logger.info(f"  Apps directory: {settings.apps_dir}")
    logger.info(f"  Config file: {settings.config_path}")
    logger.info(f"  Repository URL: {settings.base_url}/repository.json")
    if settings.auth_token:
        logger.info("  Authentication: enabled (token required as query parameter)")
    else:
        logger.info("  Authentication: disabled")
    if settings.token_mode:
        logger.info("  Download URLs: token mode (direct downloads disabled)")
    else:
        logger.info("  Download URLs: direct mode")


def create_app(settings: ServerSettings, config: Optional[RepositoryConfig] = None) -> FastAPI:
    """
    Build the FastAPI application.

    When `config` is not given it is loaded from `settings.config_path`
    during startup; a ConfigurationError then aborts startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        loaded = config if config is not None else await load_repository_config(settings.config_path)
        app.state.context = ServerContext(settings=settings, config=loaded)
        _log_settings(settings)
        if not settings.apps_dir.is_dir():
            logger.warning(f"Apps directory {settings.apps_dir} does not exist; no versions will be served")
        yield

    app = FastAPI(
        title="AltSource Repository Server",
        version=__version__,
        description="Serves an AltStore-compatible source built from a config file and the packages on disk.",
        lifespan=lifespan,
    )

    # CORS: any origin, read-only methods.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "HEAD"],
        allow_headers=["Content-Type", "Accept"],
    )

    @app.get("/health")
    async def health() -> dict:
        """
        Lightweight health check endpoint.
        """
        return {"status": "ok"}

    app.include_router(repository_router, tags=["repository"])
    app.include_router(downloads_router, tags=["downloads"])

    return app
