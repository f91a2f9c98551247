#!/usr/bin/env python3
"""
Smoke-test gateway concurrency: send N requests in parallel through the proxy.

A slow upstream must not serialize callers: with N parallel requests the total
wall time should stay close to the slowest single request, not N times it.

Run against a live gateway:
  python scripts/test_concurrent.py --url http://localhost:8000/api/treasury/daily_yield --secret YOUR_SECRET

Usage:
  python scripts/test_concurrent.py [--url URL] [--secret SECRET] [--concurrent N]
  Or set env: GATEWAY_URL, PROXY_SECRET, CONCURRENT
"""

import argparse
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor, as_completed

import httpx


def do_request(
    url: str,
    secret: str,
    index: int,
) -> tuple[int, int, float]:
    """Send one GET request; return (index, status_code, seconds)."""
    headers = {"X-Proxy-Auth": secret} if secret else {}
    start = time.monotonic()
    try:
        r = httpx.get(url, headers=headers, timeout=60)
        return (index, r.status_code, time.monotonic() - start)
    except httpx.HTTPError:
        return (index, -1, time.monotonic() - start)  # -1 = transport error


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Send N parallel requests through the gateway and report timings."
    )
    parser.add_argument(
        "--url",
        default=os.environ.get(
            "GATEWAY_URL", "http://localhost:8000/api/treasury/daily_yield"
        ),
        help="Gateway URL to hit",
    )
    parser.add_argument(
        "--secret",
        default=os.environ.get("PROXY_SECRET", ""),
        help="Shared secret sent as X-Proxy-Auth (or set PROXY_SECRET env)",
    )
    parser.add_argument(
        "--concurrent",
        type=int,
        default=int(os.environ.get("CONCURRENT", "20")),
        help="Number of concurrent requests (default 20)",
    )
    args = parser.parse_args()

    if args.concurrent < 1:
        print("Error: --concurrent must be >= 1", file=sys.stderr)
        sys.exit(1)

    print(f"Testing {args.concurrent} concurrent GET requests to {args.url}")
    print("---")

    results: list[tuple[int, int, float]] = []
    wall_start = time.monotonic()
    with ThreadPoolExecutor(max_workers=args.concurrent) as executor:
        futures = {
            executor.submit(do_request, args.url, args.secret, i): i
            for i in range(args.concurrent)
        }
        for future in as_completed(futures):
            results.append(future.result())
    wall = time.monotonic() - wall_start

    results.sort(key=lambda x: x[0])
    by_status: dict[int, int] = {}
    for idx, code, seconds in results:
        by_status[code] = by_status.get(code, 0) + 1
        print(f"  Request {idx + 1:2d}: HTTP {code} in {seconds:.2f}s")

    slowest = max(seconds for _, _, seconds in results)
    print("---")
    print("Summary: " + ", ".join(f"HTTP {k}: {v}" for k, v in sorted(by_status.items())))
    print(f"Wall time {wall:.2f}s, slowest single request {slowest:.2f}s")
    if -1 in by_status:
        print("  (-1 = connection error or timeout)")


if __name__ == "__main__":
    main()
