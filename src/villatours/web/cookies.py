"""Cookies set by the API and the attributes they share."""

from dataclasses import dataclass
from typing import Literal

from fastapi import Response

from villatours.config import Config

SESSION_COOKIE = "session"  # Signed payment session id
CSRF_COOKIE = "_csrf"  # Copy of the payment session's CSRF token
AUTH_COOKIE = "auth_token"  # Admin auth token


@dataclass(frozen=True)
class CookieSettings:
    """Attributes applied to every cookie the API sets or deletes."""

    secure: bool
    domain: str | None
    session_max_age: int
    samesite: Literal["lax", "strict", "none"] = "lax"
    httponly: bool = True
    path: str = "/"

    @classmethod
    def from_config(cls, config: Config) -> "CookieSettings":
        # Production cookies are Secure and scoped to the shared parent domain
        if config.is_production:
            return cls(secure=True, domain=config.cookie_domain, session_max_age=config.session_ttl)
        return cls(secure=False, domain=None, session_max_age=config.session_ttl)

    def set_cookie(self, response: Response, key: str, value: str, max_age: int | None = None) -> None:
        response.set_cookie(
            key=key,
            value=value,
            max_age=max_age,
            path=self.path,
            domain=self.domain,
            secure=self.secure,
            httponly=self.httponly,
            samesite=self.samesite,
        )

    def delete_cookie(self, response: Response, key: str) -> None:
        response.delete_cookie(
            key=key,
            path=self.path,
            domain=self.domain,
            secure=self.secure,
            httponly=self.httponly,
            samesite=self.samesite,
        )
