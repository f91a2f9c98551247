"""
Gateway error kinds.

Each error maps to one HTTP status and one JSON body
``{"error": <kind>, "message": <str>, ...extra}``. They are raised by the
core (auth, resolver, forwarder) and converted at the route boundary.
"""

from typing import Any


class GatewayError(Exception):
    """Base class for errors the gateway reports to the caller itself."""

    kind: str = "internal_error"
    status_code: int = 500

    def __init__(self, message: str = "", *, extra: dict[str, Any] | None = None) -> None:
        self.message = message
        self.extra = extra or {}
        super().__init__(message)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.kind}
        if self.message:
            body["message"] = self.message
        body.update(self.extra)
        return body


class AuthRejectedError(GatewayError):
    """Shared secret configured and the auth header is missing or wrong."""

    kind = "auth_rejected"
    status_code = 401

    def __init__(self, message: str = "Missing or invalid proxy auth header") -> None:
        super().__init__(message)


class MissingCredentialError(GatewayError):
    """Route needs a provider key that the server was not configured with."""

    kind = "missing_credential"
    status_code = 500

    def __init__(self, setting_name: str) -> None:
        self.setting_name = setting_name
        super().__init__(f"{setting_name} is not set")


class MissingRequiredParamError(GatewayError):
    kind = "missing_required_param"
    status_code = 400

    def __init__(self, param: str) -> None:
        self.param = param
        super().__init__(f"Parameter '{param}' is required", extra={"param": param})


class RouteNotFoundError(GatewayError):
    kind = "route_not_found"
    status_code = 404

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"No route matches {path}", extra={"path": path})


class UpstreamUnreachableError(GatewayError):
    """Transport-level failure talking to a provider (never retried)."""

    kind = "upstream_unreachable"
    status_code = 502


class InternalGatewayError(GatewayError):
    kind = "internal_error"
    status_code = 500
