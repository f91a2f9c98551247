"""
Outbound query encoding.

Standard parameters use form encoding (urlencode). Parameters listed in
raw_comma_params (Census ``get`` column selector) keep literal commas: the
upstream rejects %2C in that field.
"""

import re
from collections.abc import Collection, Mapping
from urllib.parse import quote, urlencode

_WHITESPACE = re.compile(r"\s+")


def is_present(value: str | None) -> bool:
    """None and "" are both treated as absent when building upstream requests."""
    return value is not None and value != ""


def encode_raw_comma_value(value: str) -> str:
    """Strip all whitespace, percent-encode, then restore literal commas."""
    compact = _WHITESPACE.sub("", value)
    return quote(compact, safe="").replace("%2C", ",")


def encode_query(
    params: Mapping[str, str | None],
    raw_comma_params: Collection[str] = frozenset(),
) -> str:
    """
    Serialize params in insertion order, omitting absent/empty values.

    raw_comma_params are appended after the ordinary parameters.
    E.g. {"key": "k", "get": "A, B"} with raw_comma_params={"get"}
    -> "key=k&get=A,B".
    """
    standard = [
        (k, v)
        for k, v in params.items()
        if k not in raw_comma_params and is_present(v)
    ]
    parts: list[str] = []
    if standard:
        parts.append(urlencode(standard))
    for name, value in params.items():
        if name not in raw_comma_params or not is_present(value):
            continue
        encoded = encode_raw_comma_value(value)  # type: ignore[arg-type]
        if encoded:
            parts.append(f"{quote(name, safe='')}={encoded}")
    return "&".join(parts)
