"""
Gateway request/response: normalize_params, parse_params, gateway_error, relay_response.

- normalize_params: merge query and body (body > query) into one ParameterMap.
  Body is tried as JSON, then as URL-encoded form; anything else is ignored.
- gateway_error / relay_response: the two shapes the gateway answers with.
"""

import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from statproxy.core.errors import GatewayError
from statproxy.core.gateway.forwarder import UpstreamResponse

# name -> value; None is "present but null" and is kept apart from "".
ParameterMap = dict[str, str | None]


def _stringify(value: Any) -> str | None:
    """JSON value -> query value. null stays None; arrays join with commas."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return ",".join(_stringify(v) or "" for v in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _parse_body(body: bytes) -> ParameterMap:
    """JSON object, else URL-encoded form, else {}. Never raises."""
    if not body:
        return {}
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        return {}
    try:
        raw = json.loads(text)
    except ValueError:
        pass
    else:
        if isinstance(raw, dict):
            return {str(k): _stringify(v) for k, v in raw.items()}
        return {}
    try:
        return dict(parse_qsl(text, keep_blank_values=True))
    except ValueError:
        return {}


def normalize_params(query: Mapping[str, str], body: bytes) -> ParameterMap:
    """
    Merge query-string parameters with body parameters; body wins on conflict.

    Pure: the inputs are not modified and malformed bodies fall back to an
    empty parameter set.
    """
    out: ParameterMap = dict(query)
    out.update(_parse_body(body))
    return out


async def parse_params(request: Request) -> ParameterMap:
    """Read query and raw body from a Starlette request and normalize them."""
    query = dict(request.query_params)
    body = await request.body()
    return normalize_params(query, body)


def gateway_error(exc: GatewayError) -> JSONResponse:
    """JSON body { error, message?, ... } with the error's status code."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


def relay_response(upstream: UpstreamResponse) -> Response:
    """Pass the upstream status, content type and raw bytes through unchanged."""
    # media_type stays None so Starlette does not append a charset
    return Response(
        content=upstream.body,
        status_code=upstream.status_code,
        headers={"content-type": upstream.content_type},
    )
