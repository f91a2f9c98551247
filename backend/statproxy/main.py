import logging
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

import httpx
import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from statproxy.api.main import api_router
from statproxy.api.routes import utils
from statproxy.api.routes.gateway import router as gateway_router
from statproxy.core.config import Settings, settings
from statproxy.core.errors import InternalGatewayError, RouteNotFoundError
from statproxy.core.gateway import (
    DEFAULT_ROUTES,
    Route,
    UpstreamForwarder,
    build_route_table,
    gateway_error,
)

_logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    routes: Iterable[Route] = DEFAULT_ROUTES,
) -> FastAPI:
    """
    Build the gateway app around one immutable Settings instance.

    Settings, route table and forwarder are created here once and exposed on
    app.state; request handlers only read them. ``transport`` replaces the
    outbound httpx transport (tests pass an httpx.MockTransport).
    """
    cfg = app_settings or settings
    forwarder = UpstreamForwarder(timeout=cfg.UPSTREAM_TIMEOUT, transport=transport)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await forwarder.aclose()

    app = FastAPI(
        title=cfg.PROJECT_NAME,
        openapi_url=f"{cfg.API_PREFIX}/openapi.json",
        docs_url=f"{cfg.API_PREFIX}/docs" if cfg.ENVIRONMENT == "local" else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = cfg
    app.state.route_table = build_route_table(routes)
    app.state.forwarder = forwarder

    # -----------------------------------------------------------------------
    # Global exception handlers: same { error, message } envelope as the gateway
    # -----------------------------------------------------------------------

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        """Paths outside the gateway prefix are route_not_found as well."""
        if exc.status_code == 404:
            return gateway_error(RouteNotFoundError(request.url.path))
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions: log and return internal_error."""
        _logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return gateway_error(InternalGatewayError(str(exc) or type(exc).__name__))

    if cfg.all_cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cfg.all_cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    # Health routes FIRST; they bypass proxy auth
    app.include_router(api_router, prefix=cfg.API_PREFIX)
    app.add_api_route(
        "/_health", utils.health, methods=["GET", "POST"], include_in_schema=False
    )

    # Gateway catch-all LAST: {API_PREFIX}/{path:path}
    app.include_router(gateway_router, prefix=cfg.API_PREFIX)
    return app


if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(dsn=str(settings.SENTRY_DSN), traces_sample_rate=1.0)

app = create_app()
