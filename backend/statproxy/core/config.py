from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, HttpUrl, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    """
    Process-wide configuration, read once from the environment (and .env).

    Instances are frozen; pass one explicitly into create_app() to run the
    gateway with isolated credentials (tests do this).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    PROJECT_NAME: str = "statproxy"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    SENTRY_DSN: HttpUrl | None = None
    BACKEND_CORS_ORIGINS: Annotated[
        list[AnyUrl] | str, BeforeValidator(parse_cors)
    ] = []

    # Gateway surface
    API_PREFIX: str = "/api"
    PROXY_SECRET: str = ""
    PROXY_AUTH_HEADER: str = "X-Proxy-Auth"

    # Provider credentials; an empty value disables only the routes needing it
    FRED_KEY: str = ""
    CENSUS_KEY: str = ""
    EIA_KEY: str = ""

    # Upstream hosts
    FRED_BASE_URL: str = "https://api.stlouisfed.org"
    CENSUS_BASE_URL: str = "https://api.census.gov"
    TREASURY_BASE_URL: str = "https://api.fiscaldata.treasury.gov"
    FHFA_BASE_URL: str = "https://www.fhfa.gov"
    EIA_BASE_URL: str = "https://api.eia.gov"

    UPSTREAM_TIMEOUT: float = 30.0
    # Log outbound URLs (credentials redacted) at INFO instead of DEBUG
    LOG_UPSTREAM_URLS: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def all_cors_origins(self) -> list[str]:
        return [str(origin).rstrip("/") for origin in self.BACKEND_CORS_ORIGINS]

    @property
    def auth_enabled(self) -> bool:
        return bool(self.PROXY_SECRET)


settings = Settings()  # type: ignore
