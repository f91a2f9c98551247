"""
Health-check payload.

The gateway keeps no dependencies of its own (no DB, no cache), so liveness
is the whole story: the check never touches an upstream and needs no auth.
"""

import time
from typing import Any


def liveness_payload() -> dict[str, Any]:
    """{"status": "ok", "ts": <epoch milliseconds>}."""
    return {"status": "ok", "ts": int(time.time() * 1000)}
