"""
Gateway resolver: static route table and path -> upstream URL resolution.

URL pattern: {API_PREFIX}/{path}. Route patterns are relative to the prefix;
``{name}`` captures one segment, ``{name:path}`` captures the remainder.

The table is built once and ordered most-specific first (more literal
segments, then no remainder capture, then declaration order), so overlapping
rules such as ``census/timeseries/eits/{dataset}`` and ``census/{sub:path}``
resolve the same way regardless of how they are declared.
"""

import functools
import logging
import re
import string
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import quote, quote_plus

from statproxy.core.config import Settings
from statproxy.core.errors import (
    MissingCredentialError,
    MissingRequiredParamError,
    RouteNotFoundError,
)
from statproxy.core.gateway.query import encode_query, is_present

_log = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"^\{([^}:]+)(?::(path))?\}$")
_formatter = string.Formatter()

TREASURY_OD_PATH = "/services/api/fiscal_service/v1/accounting/od"


@functools.lru_cache(maxsize=256)
def path_to_regex(pattern: str) -> re.Pattern[str]:
    """
    Convert path pattern to regex. {name} -> (?P<name>[^/]+),
    {name:path} -> (?P<name>.+); rest escaped.
    E.g. "fred/{sub:path}" -> ^fred/(?P<sub>.+)$; "fhfa/download" -> ^fhfa/download$
    """
    parts: list[str] = []
    for seg in re.split(r"(\{[^}]+\})", pattern):
        m = _PLACEHOLDER.match(seg)
        if m and m.group(1).isidentifier():
            rx = ".+" if m.group(2) else "[^/]+"
            parts.append(f"(?P<{m.group(1)}>{rx})")
        else:
            parts.append(re.escape(seg))
    return re.compile("^" + "".join(parts) + "$")


@dataclass(frozen=True)
class Route:
    """One static rule: inbound pattern -> upstream URL template + credential policy."""

    name: str
    pattern: str
    base_setting: str
    upstream_path: str
    credential_setting: str | None = None
    credential_param: str | None = None
    defaults: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    raw_comma_params: frozenset[str] = frozenset()
    forward_query: bool = True

    @property
    def regex(self) -> re.Pattern[str]:
        return path_to_regex(self.pattern)

    @property
    def specificity(self) -> tuple[int, int]:
        """(literal segment count, 1 if no remainder capture). Higher sorts first."""
        segments = self.pattern.strip("/").split("/")
        literal = sum(1 for s in segments if not _PLACEHOLDER.match(s))
        has_remainder = any(
            (m := _PLACEHOLDER.match(s)) and m.group(2) for s in segments
        )
        return (literal, 0 if has_remainder else 1)

    @property
    def template_fields(self) -> tuple[str, ...]:
        return tuple(
            name for _, name, _, _ in _formatter.parse(self.upstream_path) if name
        )


@dataclass(frozen=True)
class UpstreamTarget:
    """A resolved outbound call: route, full URL and the params it was built from."""

    route: Route
    url: str
    params: dict[str, str | None]


RouteTable = tuple[Route, ...]


DEFAULT_ROUTES: tuple[Route, ...] = (
    Route(
        name="fred",
        pattern="fred/{sub:path}",
        base_setting="FRED_BASE_URL",
        upstream_path="/{sub}",
        credential_setting="FRED_KEY",
        credential_param="api_key",
        defaults=MappingProxyType({"file_type": "json"}),
    ),
    Route(
        name="census_eits",
        pattern="census/timeseries/eits/{dataset}",
        base_setting="CENSUS_BASE_URL",
        upstream_path="/data/timeseries/eits/{dataset}",
        credential_setting="CENSUS_KEY",
        credential_param="key",
        raw_comma_params=frozenset({"get"}),
    ),
    # Compatibility form: dataset comes from the parameters instead of the path
    Route(
        name="census_eits_compat",
        pattern="census/eits",
        base_setting="CENSUS_BASE_URL",
        upstream_path="/data/timeseries/eits/{dataset}",
        credential_setting="CENSUS_KEY",
        credential_param="key",
        raw_comma_params=frozenset({"get"}),
    ),
    Route(
        name="census",
        pattern="census/{sub:path}",
        base_setting="CENSUS_BASE_URL",
        upstream_path="/data/{sub}",
        credential_setting="CENSUS_KEY",
        credential_param="key",
    ),
    Route(
        name="treasury_daily_yield",
        pattern="treasury/daily_yield",
        base_setting="TREASURY_BASE_URL",
        upstream_path=f"{TREASURY_OD_PATH}/daily_treasury_yield_curve",
    ),
    Route(
        name="treasury_debt_to_penny",
        pattern="treasury/debt_to_penny",
        base_setting="TREASURY_BASE_URL",
        upstream_path=f"{TREASURY_OD_PATH}/debt_to_penny",
    ),
    Route(
        name="fhfa_master_index",
        pattern="fhfa/master_index",
        base_setting="FHFA_BASE_URL",
        upstream_path="/hpi/download/monthly/hpi_master.xml",
        forward_query=False,
    ),
    Route(
        name="fhfa_download",
        pattern="fhfa/download",
        base_setting="FHFA_BASE_URL",
        upstream_path="/hpi/download/{file}",
        forward_query=False,
    ),
    Route(
        name="eia",
        pattern="eia/{sub:path}",
        base_setting="EIA_BASE_URL",
        upstream_path="/{sub}",
        credential_setting="EIA_KEY",
        credential_param="api_key",
    ),
)


def build_route_table(routes: Iterable[Route] = DEFAULT_ROUTES) -> RouteTable:
    """Order routes most-specific first; ties keep declaration order (stable sort)."""
    return tuple(sorted(routes, key=lambda r: r.specificity, reverse=True))


def match_route(path: str, table: RouteTable) -> tuple[Route, dict[str, str]] | None:
    """First route whose pattern matches path (no leading/trailing slash)."""
    for route in table:
        m = route.regex.match(path)
        if m:
            return (route, m.groupdict())
    return None


def strip_prefix(path: str, prefix: str) -> str | None:
    """Path relative to prefix without surrounding slashes; None if outside prefix."""
    path = (path or "").strip()
    prefix = (prefix or "").rstrip("/")
    if prefix:
        if path != prefix and not path.startswith(prefix + "/"):
            return None
        path = path[len(prefix):]
    return path.strip("/")


def resolve_route(
    path: str,
    params: Mapping[str, str | None],
    settings: Settings,
    table: RouteTable,
) -> UpstreamTarget:
    """
    Resolve an inbound path (e.g. /api/fred/series) to an UpstreamTarget.

    Raises RouteNotFoundError (echoing path), MissingCredentialError (before
    any URL is built) or MissingRequiredParamError. params is not modified.
    """
    rel = strip_prefix(path, settings.API_PREFIX)
    matched = match_route(rel, table) if rel else None
    if matched is None:
        raise RouteNotFoundError(path)
    route, path_params = matched

    credential: str | None = None
    if route.credential_setting:
        credential = getattr(settings, route.credential_setting, "") or ""
        if not credential:
            raise MissingCredentialError(route.credential_setting)

    out: dict[str, str | None] = dict(params)

    # Template fields: path captures first, otherwise taken out of the params.
    values: dict[str, str] = {}
    for name in route.template_fields:
        if name in path_params:
            values[name] = path_params[name]
            continue
        value = out.pop(name, None)
        if not is_present(value):
            raise MissingRequiredParamError(name)
        values[name] = value  # type: ignore[assignment]
    upstream_path = route.upstream_path.format(
        **{k: quote(v, safe="/") for k, v in values.items()}
    )

    for key, default in route.defaults.items():
        if not is_present(out.get(key)):
            out[key] = default

    if credential and route.credential_param:
        out[route.credential_param] = credential

    base = str(getattr(settings, route.base_setting)).rstrip("/")
    url = f"{base}{upstream_path}"
    if route.forward_query:
        qs = encode_query(out, route.raw_comma_params)
        if qs:
            url = f"{url}?{qs}"

    _log.debug("Resolved %s -> route %s", rel, route.name)
    return UpstreamTarget(route=route, url=url, params=out)


def redact_url(url: str, target: UpstreamTarget, settings: Settings) -> str:
    """Replace the injected credential in url with *** for logging."""
    route = target.route
    if not route.credential_setting:
        return url
    credential = getattr(settings, route.credential_setting, "") or ""
    if not credential:
        return url
    return url.replace(quote_plus(credential), "***").replace(credential, "***")
