from typing import Literal, Self

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 4000
    debug: bool = False
    environment: Literal["development", "production"] = "development"
    session_secret_key: str
    session_ttl: int = 24 * 60 * 60  # Payment session lifetime in seconds (fixed window from creation)
    session_store_timeout: float = 5.0  # Seconds before a session store call fails the request
    cookie_domain: str | None = None  # e.g. ceejeey.me in production, host-only cookies when unset
    cors_origins: list[str] = []
    rate_limit: int = 0  # Requests per minute per client IP, 0 disables rate limiting
    tls_enabled: bool = False
    tls_certfile: str | None = None
    tls_keyfile: str | None = None
    admin_username: str = "admin"  # Bootstrap admin created on startup when missing
    admin_password: str = "admin"
    payhere_merchant_id: str = ""
    payhere_merchant_secret: str = ""
    payhere_sandbox: bool = True
    payhere_return_url: str = ""
    payhere_cancel_url: str = ""
    payhere_notify_url: str = ""

    model_config = {
        "env_file": [".env"],
        "env_prefix": "VILLATOURS_",
        "extra": "ignore",
    }

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @model_validator(mode="after")
    def check_tls_files(self) -> Self:
        if self.tls_enabled and not (self.tls_certfile and self.tls_keyfile):
            raise ValueError("tls_enabled requires both tls_certfile and tls_keyfile")
        return self
