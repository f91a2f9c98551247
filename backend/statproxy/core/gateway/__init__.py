"""
Gateway core: auth, request/response, resolver, query encoding, forwarder.
"""

from statproxy.core.gateway.auth import check_proxy_secret, verify_proxy_auth
from statproxy.core.gateway.forwarder import UpstreamForwarder, UpstreamResponse
from statproxy.core.gateway.query import encode_query
from statproxy.core.gateway.request_response import (
    ParameterMap,
    gateway_error,
    normalize_params,
    parse_params,
    relay_response,
)
from statproxy.core.gateway.resolver import (
    DEFAULT_ROUTES,
    Route,
    RouteTable,
    UpstreamTarget,
    build_route_table,
    path_to_regex,
    redact_url,
    resolve_route,
)

__all__ = [
    "DEFAULT_ROUTES",
    "ParameterMap",
    "Route",
    "RouteTable",
    "UpstreamForwarder",
    "UpstreamResponse",
    "UpstreamTarget",
    "build_route_table",
    "check_proxy_secret",
    "encode_query",
    "gateway_error",
    "normalize_params",
    "parse_params",
    "path_to_regex",
    "redact_url",
    "relay_response",
    "resolve_route",
    "verify_proxy_auth",
]
