from typing import Any

from fastapi import APIRouter

from statproxy.core.health import liveness_payload

router = APIRouter(tags=["utils"])


@router.api_route("/health", methods=["GET", "POST"])
async def health() -> dict[str, Any]:
    """
    Liveness probe.

    Served ahead of the gateway catch-all and without the proxy-auth check:
    it reveals nothing beyond "the process is up".
    """
    return liveness_payload()
