"""
Gateway auth: shared-secret check on a single request header.

The secret is opt-in: when PROXY_SECRET is empty every request is accepted.
"""

import secrets

from starlette.requests import Request

from statproxy.core.config import Settings
from statproxy.core.errors import AuthRejectedError


def check_proxy_secret(secret: str, header_value: str | None) -> bool:
    """
    True if the request may proceed.

    Empty secret: always True. Otherwise the header must be present and equal
    to the secret byte for byte (case-sensitive, not trimmed).
    """
    if not secret:
        return True
    if header_value is None:
        return False
    return secrets.compare_digest(header_value.encode("utf-8"), secret.encode("utf-8"))


def verify_proxy_auth(request: Request, settings: Settings) -> None:
    """Raise AuthRejectedError unless the request carries the configured secret."""
    header_value = request.headers.get(settings.PROXY_AUTH_HEADER)
    if not check_proxy_secret(settings.PROXY_SECRET, header_value):
        raise AuthRejectedError()
