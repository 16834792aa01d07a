"""Application factory for git-editor API."""
from contextlib import asynccontextmanager
from datetime import timedelta

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..observability import configure_logging, get_logger
from ..observability.middleware import (
    MetricsMiddleware,
    RequestIdMiddleware,
    RequestLoggingMiddleware,
)
from .capabilities import RouterRegistry, create_capabilities_router, create_default_registry
from .config import APIConfig
from .deps import AppContext
from .errors import install_error_handlers
from .sessions import InMemorySessionStore, SessionStore, SessionSweeper
from .utility_routes import create_utility_router

logger = get_logger(__name__)


def create_app(
    config: APIConfig | None = None,
    session_store: SessionStore | None = None,
    http_client: httpx.AsyncClient | None = None,
    routers: list[str] | None = None,
    registry: RouterRegistry | None = None,
) -> FastAPI:
    """Create a pre-wired FastAPI application.

    All dependencies are injectable for testing and customization.

    Args:
        config: API configuration. Defaults to environment-derived settings.
        session_store: Session store. Defaults to InMemorySessionStore.
        http_client: Shared upstream HTTP client. When omitted one is
            created here and closed on shutdown; an injected client is
            left open for its owner.
        routers: Names of feature routers to mount. If None, mounts all.
            Valid names: 'auth', 'repos', 'branches', 'files', 'git'
        registry: Custom router registry. Defaults to create_default_registry().

    Returns:
        Configured FastAPI application with all routes mounted.

    Example:
        # Minimal usage
        app = create_app()

        # Against GitHub Enterprise
        app = create_app(APIConfig(github_api_url='https://ghe.example.com/api/v3'))

        # Read-only browser
        app = create_app(routers=['auth', 'repos', 'branches', 'files'])
    """
    configure_logging()

    config = config or APIConfig()
    # Fail fast on bad settings
    try:
        config.validate_startup()
    except ValueError as e:
        logger.error('config_validation_failed', error=str(e))
        raise

    registry = registry or create_default_registry()
    mounted = registry.resolve(routers)
    enabled_routers = [info.name for info in mounted]

    session_store = session_store or InMemorySessionStore()
    owns_http_client = http_client is None
    http_client = http_client or httpx.AsyncClient(
        timeout=config.upstream_timeout_seconds,
    )
    ctx = AppContext(config=config, session_store=session_store, http_client=http_client)
    sweeper = SessionSweeper(
        session_store,
        max_age=timedelta(seconds=config.session_max_age_seconds),
        interval_seconds=config.session_sweep_interval_seconds,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            'startup',
            version=__version__,
            upstream=config.github_api_url,
            routers=enabled_routers,
            session_max_age_seconds=config.session_max_age_seconds,
        )
        sweeper.start()
        try:
            yield
        finally:
            await sweeper.stop()
            if owns_http_client:
                await http_client.aclose()
            logger.info('shutdown')

    app = FastAPI(
        title='Git Editor API',
        description='Browser code editor backend proxying the GitHub REST API',
        version=__version__,
        lifespan=lifespan,
    )
    app.state.ctx = ctx
    app.state.session_sweeper = sweeper

    install_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
        expose_headers=['X-Request-ID'],
    )

    # Added last so it runs first: request id is set before anything logs
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    for info in mounted:
        app.include_router(info.factory(ctx), prefix=config.api_prefix)

    app.include_router(
        create_capabilities_router(enabled_routers, registry),
        prefix=config.api_prefix,
    )

    app.include_router(
        create_utility_router(ctx, registry.feature_flags(enabled_routers)),
    )

    return app
