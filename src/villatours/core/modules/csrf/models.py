"""Types for the payment session + CSRF gate pipeline."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import NamedTuple

from villatours.core.modules.session.models import Session
from villatours.errors import SessionUnavailableError

CSRF_HEADER = "X-CSRF-Token"
CSRF_BODY_FIELD = "_csrf"

# Methods subject to token verification; everything else is read-only
UNSAFE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class Outcome(StrEnum):
    FORWARD = "forward"  # Continue with the next stage
    REJECT = "reject"  # Stop, the request never reaches its handler
    SHORT_CIRCUIT = "short_circuit"  # Stop, skip remaining stages and run the handler


@dataclass(frozen=True)
class Decision:
    outcome: Outcome
    error: Exception | None = None

    @classmethod
    def forward(cls) -> "Decision":
        return cls(Outcome.FORWARD)

    @classmethod
    def short_circuit(cls) -> "Decision":
        return cls(Outcome.SHORT_CIRCUIT)

    @classmethod
    def reject(cls, error: Exception) -> "Decision":
        return cls(Outcome.REJECT, error)


@dataclass(frozen=True)
class GateRequest:
    """Framework-independent view of an inbound payment request."""

    method: str
    path: str
    requires_csrf: bool = True  # Route attribute, False for @csrf_exempt handlers
    session_cookie: str | None = None  # Signed session id as sent by the client
    header_token: str | None = None
    body_token: str | None = None

    @property
    def is_unsafe(self) -> bool:
        return self.method.upper() in UNSAFE_METHODS

    @property
    def presented_token(self) -> str | None:
        """Token from the header, falling back to the body field."""
        return self.header_token or self.body_token


@dataclass
class GateContext:
    """Per-request state produced by the gate and handed to route handlers."""

    request: GateRequest
    session: Session | None = None
    session_created: bool = False  # A new session cookie must be sent
    issued_token: str | None = None  # A new _csrf cookie must be sent
    stages_run: list[str] = field(default_factory=list)

    def require_session(self) -> Session:
        if self.session is None:
            raise SessionUnavailableError
        return self.session


type StageHandler = Callable[[GateRequest, GateContext], Awaitable[Decision]]


class Stage(NamedTuple):
    name: str
    handler: StageHandler
