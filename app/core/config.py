from functools import lru_cache
from typing import Any, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_CORS = ["http://localhost:3000", "http://localhost:5173"]


def _parse_cors_origins(v: Any) -> List[str]:
    if v is None or v == "":
        return _DEFAULT_CORS.copy()
    if isinstance(v, list):
        return [x for x in v if isinstance(x, str) and x.strip()]
    s = str(v).strip()
    if not s:
        return _DEFAULT_CORS.copy()
    if s.startswith("["):
        import json
        try:
            out = json.loads(s)
        except ValueError:
            return _DEFAULT_CORS.copy()
        return [x for x in out if isinstance(x, str) and x.strip()] or _DEFAULT_CORS.copy()
    return [x.strip() for x in s.split(",") if x.strip()] or _DEFAULT_CORS.copy()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # App
    env: str = Field(default="development", description="ENV")
    debug: bool = Field(default=False, description="DEBUG")
    secret_key: str = Field(default="change-me-in-production-min-32-chars")

    # Document store: "memory" | "mongo"
    store_backend: str = Field(default="memory", alias="STORE_BACKEND")
    mongodb_uri: str = Field(default="mongodb://localhost:27017", alias="MONGODB_URI")
    mongodb_db_name: str = Field(default="global_pocket", alias="MONGODB_DB_NAME")

    # Ephemeral cache (guest data, markers, rates): "memory" | "redis"
    cache_backend: str = Field(default="memory", alias="CACHE_BACKEND")
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")

    # Identity provider: "local" | "firebase"
    identity_backend: str = Field(default="local", alias="IDENTITY_BACKEND")
    firebase_api_key: str = Field(default="", alias="FIREBASE_API_KEY")
    firebase_auth_url: str = Field(
        default="https://identitytoolkit.googleapis.com/v1",
        alias="FIREBASE_AUTH_URL",
    )

    # Reference rates
    fiat_rates_url: str = Field(default="https://dolarapi.com/v1/dolares", alias="FIAT_RATES_URL")
    crypto_rates_url: str = Field(
        default="https://api.coingecko.com/api/v3/simple/price",
        alias="CRYPTO_RATES_URL",
    )
    rates_refresh_seconds: int = Field(default=300, alias="RATES_REFRESH_SECONDS")
    rates_cache_ttl: int = Field(default=600, alias="RATES_CACHE_TTL")
    http_timeout_seconds: float = Field(default=10.0, alias="HTTP_TIMEOUT_SECONDS")

    # Demo requests (EmailJS)
    emailjs_url: str = Field(default="https://api.emailjs.com/api/v1.0/email/send", alias="EMAILJS_URL")
    emailjs_service_id: str = Field(default="", alias="EMAILJS_SERVICE_ID")
    emailjs_template_id: str = Field(default="", alias="EMAILJS_TEMPLATE_ID")
    emailjs_public_key: str = Field(default="", alias="EMAILJS_PUBLIC_KEY")
    emailjs_private_key: str = Field(default="", alias="EMAILJS_PRIVATE_KEY")
    demo_request_recipient: str = Field(default="demo@globalpocket.app", alias="DEMO_REQUEST_RECIPIENT")

    # Sentry
    sentry_dsn: str | None = Field(default=None, alias="SENTRY_DSN")

    # CORS: env as string, exposed as list
    cors_origins_raw: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        alias="CORS_ORIGINS",
        description="Comma-separated or JSON list",
    )

    @property
    def cors_origins(self) -> List[str]:
        return _parse_cors_origins(getattr(self, "cors_origins_raw", None))

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"

    # Listing
    transactions_page_size: int = Field(default=50, alias="TRANSACTIONS_PAGE_SIZE")

    # Guest (pre-authentication) data kept in the ephemeral cache
    guest_data_ttl_seconds: int = Field(default=30 * 24 * 3600, alias="GUEST_DATA_TTL_SECONDS")


@lru_cache
def get_settings() -> Settings:
    return Settings()
