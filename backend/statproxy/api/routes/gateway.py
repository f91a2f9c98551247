"""
Gateway: catch-all {API_PREFIX}/{path:path} for GET and POST.

Flow: parse_params -> auth -> resolve -> forward -> relay.
Auth is checked before the route table is consulted, so unauthenticated
callers learn nothing about routing. The outbound call is awaited on the
shared httpx.AsyncClient; the event loop keeps serving other requests.
"""

import logging

from fastapi import APIRouter, Request
from starlette.responses import Response

from statproxy.api.deps import ForwarderDep, RouteTableDep, SettingsDep
from statproxy.core.errors import GatewayError, InternalGatewayError
from statproxy.core.gateway import (
    gateway_error,
    parse_params,
    redact_url,
    relay_response,
    resolve_route,
    verify_proxy_auth,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["gateway"], include_in_schema=False)


@router.api_route("/{path:path}", methods=["GET", "POST"])
async def gateway_proxy(
    path: str,  # noqa: ARG001 resolved from request.url.path (prefix included)
    request: Request,
    settings: SettingsDep,
    route_table: RouteTableDep,
    forwarder: ForwarderDep,
) -> Response:
    """
    Resolve the path to an upstream, inject credentials, GET it and relay the
    upstream status, content type and body unchanged. Gateway-side failures
    return { error, message } JSON (see statproxy.core.errors).
    """
    inbound_path = request.url.path
    try:
        params = await parse_params(request)
        logger.info("Incoming %s %s", request.method, inbound_path)

        verify_proxy_auth(request, settings)

        target = resolve_route(inbound_path, params, settings, route_table)
        log_level = logging.INFO if settings.LOG_UPSTREAM_URLS else logging.DEBUG
        logger.log(
            log_level,
            "Forwarding %s via route %s to %s",
            inbound_path,
            target.route.name,
            redact_url(target.url, target, settings),
        )

        upstream = await forwarder.fetch(target.url)
    except GatewayError as e:
        logger.warning(
            "Gateway error on %s %s: %s (%s)",
            request.method,
            inbound_path,
            e.kind,
            e.message,
        )
        return gateway_error(e)
    except Exception as e:
        logger.exception("Unexpected error on %s %s", request.method, inbound_path)
        return gateway_error(InternalGatewayError(str(e)))

    logger.info(
        "Upstream %s answered %s (%s, %d bytes)",
        target.route.name,
        upstream.status_code,
        upstream.content_type,
        len(upstream.body),
    )
    return relay_response(upstream)
